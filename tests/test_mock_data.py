from __future__ import annotations

from splitchart.analysis.quality import analyze_data_quality
from splitchart.io.mock_data import (
    PRESETS,
    MockDataOptions,
    generate_financial_rows,
    generate_mock_rows,
)


def test_generate_mock_rows_is_seeded_and_shaped() -> None:
    options = MockDataOptions(count=12, series_fields=["a", "b"], seed=7)

    first = generate_mock_rows(options)
    second = generate_mock_rows(options)

    assert first == second
    assert len(first) == 12
    assert first[0]["date_display"] == "2020-01"
    assert first[11]["date_display"] == "2020-12"
    assert all(set(row) == {"date", "date_display", "a", "b"} for row in first)
    assert all(row["a"] >= 0 and row["b"] >= 0 for row in first)


def test_generate_mock_rows_date_display_per_datetime_type() -> None:
    quarterly = generate_mock_rows(MockDataOptions(count=3, datetime_type="quarter"))
    weekly = generate_mock_rows(MockDataOptions(count=2, datetime_type="week"))

    assert [row["date_display"] for row in quarterly] == ["2020-Q1", "2020-Q2", "2020-Q3"]
    assert [row["date_display"] for row in weekly] == ["2020-W01", "2020-W02"]


def test_generate_mock_rows_null_probability_one_blanks_every_value() -> None:
    rows = generate_mock_rows(MockDataOptions(count=5, series_fields=["a"], null_probability=1.0))

    assert all(row["a"] is None for row in rows)
    assert len(analyze_data_quality(rows, ["a"]).missing) == 5


def test_generate_mock_rows_with_outliers_diverges_from_baseline() -> None:
    rows = generate_mock_rows(
        MockDataOptions(
            count=60,
            series_fields=["v"],
            include_outliers=True,
            outlier_probability=0.1,
            outlier_multiplier=20.0,
            seed=3,
        )
    )
    baseline = generate_mock_rows(MockDataOptions(count=60, series_fields=["v"], seed=3))

    assert rows != baseline


def test_presets_and_financial_profit() -> None:
    assert set(PRESETS) == {"simple", "outliers", "missing", "financial"}
    for preset in PRESETS.values():
        assert preset()

    for row in generate_financial_rows(points=6):
        assert row["profit"] == round(row["revenue"] - row["cost"], 2)
