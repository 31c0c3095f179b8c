from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from splitchart.analysis.records import Domain, is_finite_number

EMPTY_STACKED_DOMAIN: Domain = (-10.0, 10.0)


@dataclass(frozen=True)
class ZeroLineStyle:
    use_solid: bool
    use_axis_style: bool


def round_to_nice(value: float, is_max: bool) -> float:
    """Round outward to the value's leading power of ten (420 -> 500, -42 -> -50)."""
    if value == 0:
        return 0.0
    magnitude = 10 ** math.floor(math.log10(abs(value)))
    if is_max and value >= 0:
        return math.ceil(value / magnitude) * magnitude
    return math.floor(value / magnitude) * magnitude


def stacked_domain(
    rows: Sequence[Mapping[str, Any]],
    positive_fields: Sequence[str],
    negative_fields: Sequence[str],
) -> Domain:
    positive_max = 0.0
    negative_min = 0.0
    for row in rows:
        positive_sum = sum(
            float(row.get(field)) for field in positive_fields if is_finite_number(row.get(field))
        )
        negative_sum = sum(
            float(row.get(field)) for field in negative_fields if is_finite_number(row.get(field))
        )
        positive_max = max(positive_max, positive_sum)
        negative_min = min(negative_min, negative_sum)

    if positive_max == 0 and negative_min == 0:
        return EMPTY_STACKED_DOMAIN
    return (round_to_nice(negative_min, is_max=False), round_to_nice(positive_max, is_max=True))


def zero_line_style(rows: Sequence[Mapping[str, Any]], fields: Sequence[str]) -> ZeroLineStyle:
    values = [
        float(row.get(field))
        for row in rows
        for field in fields
        if is_finite_number(row.get(field)) and row.get(field) != 0
    ]
    if not values:
        return ZeroLineStyle(use_solid=False, use_axis_style=False)

    has_positive = any(value > 0 for value in values)
    has_negative = any(value < 0 for value in values)
    if has_positive and has_negative:
        return ZeroLineStyle(use_solid=True, use_axis_style=False)
    # Single-signed data: the zero line doubles as the axis line.
    return ZeroLineStyle(use_solid=True, use_axis_style=True)
