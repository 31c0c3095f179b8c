from __future__ import annotations

import copy

import pytest

from splitchart.analysis.detect import detect_outliers_and_missing
from splitchart.analysis.fences import compute_fences
from splitchart.analysis.records import FieldFence, OutlierRecord
from splitchart.analysis.regions import classify_by_region


def _rows() -> list[dict[str, object]]:
    v_values = [10, 11, 12, 13, 14, 15, 16, 17, 18, 100]
    return [
        {
            "date": f"2024-{idx + 1:02d}-01",
            "date_display": f"24-{idx + 1:02d}",
            "v": v_value,
            "w": idx + 1,
        }
        for idx, v_value in enumerate(v_values)
    ]


def _classify(rows: list[dict[str, object]], fields: list[str], all_fields=None):
    fences = compute_fences(rows, fields)
    detection = detect_outliers_and_missing(rows, fields, fences)
    return classify_by_region(rows, fields, fences, detection.outliers, all_fields=all_fields)


def test_classify_keeps_every_row_in_normal_region_in_order() -> None:
    rows = _rows()
    classified = _classify(rows, ["v", "w"])

    assert len(classified.normal.data) == len(rows)
    assert [row["date_display"] for row in classified.normal.data] == [
        row["date_display"] for row in rows
    ]


def test_classify_masks_outlier_cells_and_copies_full_row_to_upper() -> None:
    rows = _rows()
    classified = _classify(rows, ["v", "w"])

    masked = classified.normal.data[9]
    assert masked == {"date": "2024-10-01", "date_display": "24-10", "v": None, "w": 10}
    assert classified.upper.data == [rows[9]]
    assert classified.upper.data[0] is not rows[9]
    assert classified.upper.has_data
    assert classified.lower.data == []
    assert not classified.lower.has_data

    for original, normal_row in zip(rows[:9], classified.normal.data[:9]):
        assert normal_row == original


def test_classify_computes_padded_domains_around_fences() -> None:
    classified = _classify(_rows(), ["v", "w"])

    # v fence: (4.5, 24.5); w fence: (-4.5, 15.5); union padded by 5%.
    assert classified.normal.domain == pytest.approx((-5.95, 25.95))
    assert classified.upper.domain == pytest.approx((95.0, 105.0))
    assert classified.lower.domain == pytest.approx((-15.95, -10.95))
    assert classified.upper.domain[0] >= classified.normal.domain[1]


def test_classify_places_row_in_both_outlier_regions() -> None:
    rows = [{"date": "2024-01-01", "date_display": "r1", "a": 100, "b": -100, "c": 1}]
    fence = FieldFence(q1=3.0, q3=8.0, lower=-4.5, upper=15.5)
    outliers = [
        OutlierRecord(date_display="r1", field="a", value=100.0, bound="upper"),
        OutlierRecord(date_display="r1", field="b", value=-100.0, bound="lower"),
    ]

    classified = classify_by_region(rows, ["a", "b"], {"a": fence, "b": fence}, outliers)

    assert classified.upper.data == rows
    assert classified.lower.data == rows
    assert classified.normal.data == [
        {"date": "2024-01-01", "date_display": "r1", "a": None, "b": None}
    ]


def test_classify_keeps_non_analyzed_fields_unmasked() -> None:
    rows = [{"date": "2024-01-01", "date_display": "r1", "a": 100, "c": 999}]
    fence = FieldFence(q1=3.0, q3=8.0, lower=-4.5, upper=15.5)
    outliers = [
        OutlierRecord(date_display="r1", field="a", value=100.0, bound="upper"),
        OutlierRecord(date_display="r1", field="c", value=999.0, bound="upper"),
    ]

    classified = classify_by_region(
        rows, ["a"], {"a": fence, "c": fence}, outliers, all_fields=["a", "c"]
    )

    assert classified.normal.data == [
        {"date": "2024-01-01", "date_display": "r1", "a": None, "c": 999}
    ]


def test_classify_empty_dataset_returns_default_regions() -> None:
    classified = classify_by_region([], ["v"], {}, [])

    assert classified.normal.data == []
    assert classified.normal.domain == (0.0, 100.0)
    assert classified.upper.data == []
    assert classified.lower.data == []
    assert not classified.upper.has_data
    assert not classified.lower.has_data
    assert classified.upper.domain == pytest.approx((105.0, 110.0))
    assert classified.lower.domain == pytest.approx((-10.0, -5.0))


def test_classify_is_repeatable_and_leaves_input_untouched() -> None:
    rows = _rows()
    snapshot = copy.deepcopy(rows)

    first = _classify(rows, ["v", "w"])
    second = _classify(rows, ["v", "w"])

    assert first == second
    assert rows == snapshot


def test_classify_absent_analyzed_field_becomes_none_in_normal_row() -> None:
    rows = [{"date_display": "r1"}]

    classified = classify_by_region(rows, ["v"], {}, [])

    assert classified.normal.data == [{"date": None, "date_display": "r1", "v": None}]
