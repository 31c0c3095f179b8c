from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal

import numpy as np
import pandas as pd

from splitchart.analysis.records import DATE_DISPLAY_KEY, DATE_KEY, Row

MockDatetimeType = Literal["day", "week", "month", "quarter", "year"]
Trend = Literal["up", "down", "flat", "wave"]

STEP_OFFSETS = {
    "day": pd.DateOffset(days=1),
    "week": pd.DateOffset(weeks=1),
    "month": pd.DateOffset(months=1),
    "quarter": pd.DateOffset(months=3),
    "year": pd.DateOffset(years=1),
}


@dataclass(frozen=True)
class MockDataOptions:
    count: int = 30
    series_fields: list[str] = field(default_factory=lambda: ["revenue", "cost", "profit"])
    datetime_type: MockDatetimeType = "month"
    start_date: str = "2020-01-01"
    min_value: float = 100.0
    max_value: float = 1000.0
    null_probability: float = 0.0
    include_outliers: bool = False
    outlier_probability: float = 0.05
    outlier_multiplier: float = 3.0
    trend: Trend = "flat"
    seasonality: bool = False
    seed: int = 42


def format_date_display(timestamp: pd.Timestamp, datetime_type: str) -> str:
    if datetime_type == "week":
        iso = timestamp.isocalendar()
        return f"{iso[0]}-W{iso[1]:02d}"
    if datetime_type == "month":
        return timestamp.strftime("%Y-%m")
    if datetime_type == "quarter":
        return f"{timestamp.year}-Q{(timestamp.month - 1) // 3 + 1}"
    if datetime_type == "year":
        return timestamp.strftime("%Y")
    return timestamp.strftime("%Y-%m-%d")


def _trend_offset(trend: str, position: float, spread: float) -> float:
    if trend == "up":
        return position * spread * 0.5
    if trend == "down":
        return -position * spread * 0.5
    if trend == "wave":
        return math.sin(position * math.pi * 4) * spread * 0.3
    return 0.0


def generate_mock_rows(options: MockDataOptions | None = None) -> list[Row]:
    """Synthetic series rows with optional trend, seasonality, gaps and outliers.

    Values are clipped at zero and rounded to 2 decimals. The same seed always
    yields the same rows.
    """
    options = options or MockDataOptions()
    rng = np.random.default_rng(options.seed)
    spread = options.max_value - options.min_value
    offset = STEP_OFFSETS[options.datetime_type]

    base_values = {
        name: options.min_value + rng.random() * spread for name in options.series_fields
    }

    rows: list[Row] = []
    current = pd.Timestamp(options.start_date)
    for index in range(options.count):
        row: Row = {
            DATE_KEY: current.isoformat(),
            DATE_DISPLAY_KEY: format_date_display(current, options.datetime_type),
        }
        position = index / options.count
        for name in options.series_fields:
            if options.null_probability > 0 and rng.random() < options.null_probability:
                row[name] = None
                continue

            value = base_values[name] + _trend_offset(options.trend, position, spread)
            if options.seasonality:
                value *= math.sin((index / 12) * math.pi * 2) * 0.2 + 1
            value += (rng.random() - 0.5) * spread * 0.2

            if options.include_outliers and rng.random() < options.outlier_probability:
                direction = 1.0 if rng.random() > 0.5 else -1.0
                value += direction * spread * options.outlier_multiplier * rng.random()

            row[name] = round(max(0.0, value), 2)

        rows.append(row)
        current = current + offset
    return rows


def generate_simple_time_series(series_count: int = 3, points: int = 24) -> list[Row]:
    return generate_mock_rows(
        MockDataOptions(
            count=points,
            series_fields=[f"series_{idx + 1}" for idx in range(series_count)],
            trend="up",
            seasonality=True,
        )
    )


def generate_rows_with_outliers(points: int = 30) -> list[Row]:
    return generate_mock_rows(
        MockDataOptions(
            count=points,
            series_fields=["value", "baseline"],
            include_outliers=True,
            outlier_probability=0.1,
            outlier_multiplier=2.5,
        )
    )


def generate_rows_with_missing(points: int = 30) -> list[Row]:
    return generate_mock_rows(
        MockDataOptions(
            count=points,
            series_fields=["actual", "forecast"],
            null_probability=0.15,
        )
    )


def generate_financial_rows(points: int = 12) -> list[Row]:
    rows = generate_mock_rows(
        MockDataOptions(
            count=points,
            series_fields=["revenue", "cost"],
            min_value=50000.0,
            max_value=100000.0,
            trend="up",
            seasonality=True,
        )
    )
    for row in rows:
        revenue = row.get("revenue")
        cost = row.get("cost")
        row["profit"] = (
            round(revenue - cost, 2) if revenue is not None and cost is not None else None
        )
    return rows


PRESETS = {
    "simple": generate_simple_time_series,
    "outliers": generate_rows_with_outliers,
    "missing": generate_rows_with_missing,
    "financial": generate_financial_rows,
}
