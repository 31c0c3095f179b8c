from __future__ import annotations

from splitchart.analysis.detect import detect_outliers_and_missing
from splitchart.analysis.domains import normal_domain, outlier_domain
from splitchart.analysis.fences import compute_fences
from splitchart.analysis.layout import compute_region_heights
from splitchart.analysis.quality import (
    analyze_data_quality,
    analyze_data_quality_extended,
    analyze_dual_axis,
    filter_outliers_from_data,
)
from splitchart.analysis.records import (
    ClassifiedDataset,
    FieldFence,
    MissingRecord,
    OutlierRecord,
    Region,
    RegionHeights,
)
from splitchart.analysis.regions import classify_by_region
from splitchart.features.aggregates import (
    sum_by_field,
    sum_by_field_and_year,
    to_scatter_points,
    treemap_nodes,
)

__all__ = [
    "ClassifiedDataset",
    "FieldFence",
    "MissingRecord",
    "OutlierRecord",
    "Region",
    "RegionHeights",
    "analyze_data_quality",
    "analyze_data_quality_extended",
    "analyze_dual_axis",
    "classify_by_region",
    "compute_fences",
    "compute_region_heights",
    "detect_outliers_and_missing",
    "filter_outliers_from_data",
    "normal_domain",
    "outlier_domain",
    "sum_by_field",
    "sum_by_field_and_year",
    "to_scatter_points",
    "treemap_nodes",
]
