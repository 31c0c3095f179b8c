from __future__ import annotations

import math

from splitchart.analysis.detect import detect_outliers_and_missing
from splitchart.analysis.records import FieldFence, MissingRecord, OutlierRecord

FENCE = FieldFence(q1=3.0, q3=8.0, lower=-4.5, upper=15.5)


def test_detect_flags_upper_and_lower_outliers() -> None:
    rows = [
        {"date_display": "a", "v": 100},
        {"date_display": "b", "v": -50},
        {"date_display": "c", "v": 5},
        {"date_display": "d", "v": 15.5},
    ]

    result = detect_outliers_and_missing(rows, ["v"], {"v": FENCE})

    assert result.outliers == [
        OutlierRecord(date_display="a", field="v", value=100.0, bound="upper"),
        OutlierRecord(date_display="b", field="v", value=-50.0, bound="lower"),
    ]
    assert result.missing == []


def test_detect_orders_records_by_row_then_field() -> None:
    rows = [
        {"date_display": "r1", "a": 100, "b": -100},
        {"date_display": "r2", "a": -100},
    ]

    result = detect_outliers_and_missing(rows, ["a", "b"], {"a": FENCE, "b": FENCE})

    assert [(o.date_display, o.field, o.bound) for o in result.outliers] == [
        ("r1", "a", "upper"),
        ("r1", "b", "lower"),
        ("r2", "a", "lower"),
    ]
    assert result.missing == [MissingRecord(date_display="r2", field="b")]


def test_detect_records_null_absent_and_nan_as_missing_only() -> None:
    rows = [
        {"date_display": "null", "v": None},
        {"date_display": "absent"},
        {"date_display": "nan", "v": math.nan},
    ]

    result = detect_outliers_and_missing(rows, ["v"], {"v": FENCE})

    assert result.outliers == []
    assert result.missing == [
        MissingRecord(date_display="null", field="v"),
        MissingRecord(date_display="absent", field="v"),
        MissingRecord(date_display="nan", field="v"),
    ]


def test_detect_without_fence_only_reports_missing() -> None:
    rows = [{"date_display": "a", "v": 1e9}, {"date_display": "b", "v": None}]

    result = detect_outliers_and_missing(rows, ["v"], {})

    assert result.outliers == []
    assert result.missing == [MissingRecord(date_display="b", field="v")]


def test_detect_ignores_non_numeric_and_infinite_values() -> None:
    rows = [
        {"date_display": "text", "v": "1000"},
        {"date_display": "flag", "v": True},
        {"date_display": "inf", "v": math.inf},
    ]

    result = detect_outliers_and_missing(rows, ["v"], {"v": FENCE})

    assert result.outliers == []
    assert result.missing == []
