from __future__ import annotations

from splitchart.analysis.records import ClassifiedDataset, RegionHeights

DEFAULT_MIN_HEIGHT = 50.0
OUTLIER_RATIO = 0.30


def compute_region_heights(
    classified: ClassifiedDataset,
    total_height: float,
    min_height: float = DEFAULT_MIN_HEIGHT,
) -> RegionHeights:
    """Fixed-ratio split of the chart height across the three regions.

    Outlier regions share 30% of the height (evenly when both exist), each
    floored at ``min_height``; the normal region takes what is left. When
    the floors alone exceed ``total_height`` the normal region collapses to
    zero and the heights sum to ``upper + lower`` instead.
    """
    total = max(float(total_height), 0.0)
    has_upper = classified.upper.has_data
    has_lower = classified.lower.has_data

    if not has_upper and not has_lower:
        return RegionHeights(upper=0.0, normal=total, lower=0.0)

    upper = 0.0
    lower = 0.0
    if has_upper and has_lower:
        share = max(total * OUTLIER_RATIO / 2, min_height)
        upper = share
        lower = share
    elif has_upper:
        upper = max(total * OUTLIER_RATIO, min_height)
    else:
        lower = max(total * OUTLIER_RATIO, min_height)

    normal = max(total - upper - lower, 0.0)
    return RegionHeights(upper=upper, normal=normal, lower=lower)
