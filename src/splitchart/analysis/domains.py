from __future__ import annotations

from typing import Literal, Mapping, Sequence

from splitchart.analysis.records import (
    DEFAULT_NORMAL_DOMAIN,
    Domain,
    FieldFence,
    is_finite_number,
)

NORMAL_PADDING_RATIO = 0.05
NORMAL_PADDING_FALLBACK = 5.0
GAP_RATIO = 0.05
MIN_GAP = 5.0
EMPTY_MARGIN_RATIO = 0.1
MIN_EMPTY_MARGIN = 10.0
OUTLIER_PADDING_RATIO = 0.1
POINT_PADDING_RATIO = 0.05
MAX_POINT_PADDING = 10.0
MIN_SPAN = 1.0


def normal_domain(fields: Sequence[str], fences: Mapping[str, FieldFence]) -> Domain:
    """Union of the analyzed fields' fences, padded by 5% of its span."""
    bounded = [fences[field] for field in fields if field in fences]
    if not bounded:
        return DEFAULT_NORMAL_DOMAIN

    global_lower = min(fence.lower for fence in bounded)
    global_upper = max(fence.upper for fence in bounded)
    padding = (global_upper - global_lower) * NORMAL_PADDING_RATIO or NORMAL_PADDING_FALLBACK
    return (global_lower - padding, global_upper + padding)


def region_gap(normal: Domain) -> float:
    return max((normal[1] - normal[0]) * GAP_RATIO, MIN_GAP)


def outlier_domain(
    direction: Literal["upper", "lower"],
    values: Sequence[float],
    normal: Domain,
) -> Domain:
    """Axis range for an outlier band that stays clear of the normal band.

    The returned range starts at least one gap beyond the normal domain and
    spans at least max(gap / 2, 1), so a single outlier still gets an axis.
    Without values a thin synthetic band just outside the normal domain is
    returned so the caller always has something to size.
    """
    normal_min, normal_max = normal
    normal_range = normal_max - normal_min
    finite = [float(value) for value in values if is_finite_number(value)]

    if not finite:
        margin = max(normal_range * EMPTY_MARGIN_RATIO, MIN_EMPTY_MARGIN)
        if direction == "upper":
            return (normal_max + margin * 0.5, normal_max + margin)
        return (normal_min - margin, normal_min - margin * 0.5)

    low = min(finite)
    high = max(finite)
    spread = high - low
    gap = max(normal_range * GAP_RATIO, MIN_GAP)
    if spread > 0:
        padding = spread * OUTLIER_PADDING_RATIO
    else:
        padding = min(abs(high) * POINT_PADDING_RATIO, MAX_POINT_PADDING)
    min_span = max(gap * 0.5, MIN_SPAN)

    if direction == "upper":
        final_min = max(low - padding, normal_max + gap)
        adjusted_max = max(high + padding, final_min + min_span)
        return (final_min, adjusted_max)

    final_max = min(high + padding, normal_min - gap)
    adjusted_min = min(low - padding, final_max - min_span)
    return (adjusted_min, final_max)
