from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np

from splitchart.analysis.fences import fence_from_values
from splitchart.analysis.records import DATE_DISPLAY_KEY, Domain, FieldFence, is_finite_number

EMPTY_SCATTER_DOMAIN: Domain = (0.0, 100.0)


@dataclass(frozen=True)
class RegressionStats:
    slope: float
    intercept: float
    r2: float


@dataclass(frozen=True)
class ScatterPoint:
    x: float
    y: float
    date_display: Any = None


def scatter_pairs(
    rows: Sequence[Mapping[str, Any]],
    x_field: str,
    y_field: str,
) -> list[ScatterPoint]:
    return [
        ScatterPoint(
            x=float(row[x_field]),
            y=float(row[y_field]),
            date_display=row.get(DATE_DISPLAY_KEY),
        )
        for row in rows
        if is_finite_number(row.get(x_field)) and is_finite_number(row.get(y_field))
    ]


def linear_regression(points: Sequence[ScatterPoint]) -> RegressionStats | None:
    """Ordinary least squares fit; None below two points or for vertical data."""
    n = len(points)
    if n < 2:
        return None

    xs = np.asarray([point.x for point in points], dtype=float)
    ys = np.asarray([point.y for point in points], dtype=float)
    sum_x = float(xs.sum())
    sum_y = float(ys.sum())
    denominator = n * float((xs * xs).sum()) - sum_x * sum_x
    if denominator == 0:
        return None

    slope = (n * float((xs * ys).sum()) - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    ss_total = float(((ys - sum_y / n) ** 2).sum())
    ss_residual = float(((ys - (slope * xs + intercept)) ** 2).sum())
    r2 = 0.0 if ss_total == 0 else 1 - ss_residual / ss_total
    return RegressionStats(slope=slope, intercept=intercept, r2=r2)


def residuals(points: Sequence[ScatterPoint], stats: RegressionStats) -> np.ndarray:
    return np.asarray(
        [point.y - (stats.slope * point.x + stats.intercept) for point in points],
        dtype=float,
    )


def residual_outlier_bounds(
    points: Sequence[ScatterPoint],
    stats: RegressionStats | None,
) -> FieldFence | None:
    """Tukey fence over the fit residuals, with the same nearest-rank rule as the series fences."""
    if stats is None:
        return None
    return fence_from_values(residuals(points, stats))


def count_residual_outliers(
    points: Sequence[ScatterPoint],
    stats: RegressionStats | None,
) -> int:
    bounds = residual_outlier_bounds(points, stats)
    if bounds is None:
        return 0
    values = residuals(points, stats)
    return int(((values < bounds.lower) | (values > bounds.upper)).sum())


def _round_step(value: float, ceil: bool) -> float:
    magnitude = abs(value)
    if magnitude >= 1000:
        step = 100
    elif magnitude >= 10:
        step = 10
    else:
        step = 1
    if ceil:
        return float(math.ceil(value / step) * step)
    return float(math.floor(value / step) * step)


def scatter_domain(values: Sequence[float]) -> Domain:
    finite = [float(value) for value in values if is_finite_number(value)]
    if not finite:
        return EMPTY_SCATTER_DOMAIN
    low = min(finite)
    high = max(finite)
    padding = (high - low) * 0.05 or 1.0
    return (_round_step(low - padding, ceil=False), _round_step(high + padding, ceil=True))
