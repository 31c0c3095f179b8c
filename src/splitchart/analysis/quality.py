from __future__ import annotations

from dataclasses import asdict
from typing import Any, Mapping, Sequence

import pandas as pd

from splitchart.analysis.detect import detect_outliers_and_missing
from splitchart.analysis.fences import compute_fences
from splitchart.analysis.records import (
    DATE_DISPLAY_KEY,
    DATE_KEY,
    ClassifiedDataset,
    DataQualityResult,
    ExtendedAnalysisResult,
    FieldFence,
    MissingRecord,
    OutlierRecord,
    Region,
    SeriesFence,
    is_finite_number,
)
from splitchart.analysis.regions import classify_by_region


def analyze_data_quality(
    rows: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
) -> DataQualityResult:
    fences = compute_fences(rows, fields)
    detection = detect_outliers_and_missing(rows, fields, fences)
    return DataQualityResult(
        fences=fences,
        outliers=detection.outliers,
        missing=detection.missing,
    )


def analyze_data_quality_extended(
    rows: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
    all_fields: Sequence[str] | None = None,
) -> ExtendedAnalysisResult:
    basic = analyze_data_quality(rows, fields)
    series_fences = [
        SeriesFence(field=field, q1=fence.q1, q3=fence.q3, lower=fence.lower, upper=fence.upper)
        for field, fence in basic.fences.items()
    ]
    classified = classify_by_region(
        rows,
        fields,
        basic.fences,
        basic.outliers,
        all_fields=all_fields,
    )
    return ExtendedAnalysisResult(
        fences=basic.fences,
        outliers=basic.outliers,
        missing=basic.missing,
        classified=classified,
        has_upper_outliers=classified.upper.has_data,
        has_lower_outliers=classified.lower.has_data,
        series_fences=series_fences,
    )


def split_axis_fields(
    fields: Sequence[str],
    placements: Mapping[str, str] | None,
) -> tuple[list[str], list[str]]:
    if not placements:
        return list(fields), []
    left = [field for field in fields if placements.get(field, "left") == "left"]
    right = [field for field in fields if placements.get(field) == "right"]
    return left, right


def analyze_dual_axis(
    rows: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
    placements: Mapping[str, str] | None,
) -> ExtendedAnalysisResult:
    """Analyze left and right axis fields separately and merge the results.

    Each side is classified with the full field list as ``all_fields`` so
    the other axis keeps its values in the normal region. Missing values
    are not tracked per axis.
    """
    left_fields, right_fields = split_axis_fields(fields, placements)
    left = (
        analyze_data_quality_extended(rows, left_fields, all_fields=fields) if left_fields else None
    )
    right = (
        analyze_data_quality_extended(rows, right_fields, all_fields=fields)
        if right_fields
        else None
    )

    sides = [side for side in (left, right) if side is not None]
    outliers: list[OutlierRecord] = []
    fences: dict[str, FieldFence] = {}
    for side in sides:
        outliers.extend(side.outliers)
        fences.update(side.fences)

    left_classified = left.classified if left is not None else None
    right_classified = right.classified if right is not None else None
    return ExtendedAnalysisResult(
        fences=fences,
        outliers=outliers,
        missing=[],
        classified=left_classified or right_classified,
        has_upper_outliers=any(side.has_upper_outliers for side in sides),
        has_lower_outliers=any(side.has_lower_outliers for side in sides),
        left_classified=left_classified,
        right_classified=right_classified,
    )


def filter_outliers_from_data(
    rows: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
    fences: Mapping[str, FieldFence],
) -> list[dict[str, Any]]:
    kept: list[dict[str, Any]] = []
    for row in rows:
        is_outlier = False
        for field in fields:
            value = row.get(field)
            fence = fences.get(field)
            if fence is not None and is_finite_number(value):
                if value < fence.lower or value > fence.upper:
                    is_outlier = True
                    break
        if not is_outlier:
            kept.append(dict(row))
    return kept


def outliers_frame(outliers: Sequence[OutlierRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [asdict(outlier) for outlier in outliers],
        columns=[DATE_DISPLAY_KEY, "field", "value", "bound"],
    )


def missing_frame(missing: Sequence[MissingRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [asdict(record) for record in missing],
        columns=[DATE_DISPLAY_KEY, "field"],
    )


def fences_frame(fences: Mapping[str, FieldFence]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"field": field, **asdict(fence), "iqr": fence.iqr} for field, fence in fences.items()],
        columns=["field", "q1", "q3", "lower", "upper", "iqr"],
    )


def region_frame(region: Region, fields: Sequence[str]) -> pd.DataFrame:
    series = [field for field in fields if field not in (DATE_KEY, DATE_DISPLAY_KEY)]
    columns = [DATE_KEY, DATE_DISPLAY_KEY, *series]
    frame = pd.DataFrame(
        [{column: row.get(column) for column in columns} for row in region.data],
        columns=columns,
    )
    # Series columns hold numbers only; anything else is written as missing.
    for field in series:
        frame[field] = pd.to_numeric(frame[field], errors="coerce")
    return frame


def _bound_counts(outliers: Sequence[OutlierRecord]) -> dict[str, dict[str, int]]:
    counts: dict[str, dict[str, int]] = {}
    for outlier in outliers:
        per_field = counts.setdefault(outlier.field, {"upper": 0, "lower": 0})
        per_field[outlier.bound] += 1
    return counts


def _region_summary(region: Region) -> dict[str, Any]:
    return {
        "rows": len(region.data),
        "domain": [float(region.domain[0]), float(region.domain[1])],
        "has_data": bool(region.has_data),
    }


def outlier_summary(result: ExtendedAnalysisResult) -> dict[str, Any]:
    summary: dict[str, Any] = {
        "n_outliers": len(result.outliers),
        "n_upper_outliers": sum(1 for outlier in result.outliers if outlier.bound == "upper"),
        "n_lower_outliers": sum(1 for outlier in result.outliers if outlier.bound == "lower"),
        "n_missing": len(result.missing),
        "fenced_fields": sorted(result.fences),
        "outliers_by_field": _bound_counts(result.outliers),
        "has_upper_outliers": bool(result.has_upper_outliers),
        "has_lower_outliers": bool(result.has_lower_outliers),
    }
    regions: dict[str, ClassifiedDataset] = {}
    if result.left_classified is not None or result.right_classified is not None:
        if result.left_classified is not None:
            regions["left"] = result.left_classified
        if result.right_classified is not None:
            regions["right"] = result.right_classified
    elif result.classified is not None:
        regions["primary"] = result.classified

    summary["regions"] = {
        name: {
            "upper": _region_summary(classified.upper),
            "normal": _region_summary(classified.normal),
            "lower": _region_summary(classified.lower),
        }
        for name, classified in regions.items()
    }
    return summary
