from __future__ import annotations

from typing import Any, Mapping, Sequence

from splitchart.analysis.records import (
    DATE_DISPLAY_KEY,
    DATE_KEY,
    OutlierRecord,
    is_finite_number,
)
from splitchart.preprocess.time import parse_date


def sum_by_field(
    rows: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
) -> list[dict[str, Any]]:
    """Whole-period total per series, one pie slice per field."""
    sums: list[dict[str, Any]] = []
    for field in fields:
        total = 0.0
        for row in rows:
            value = row.get(field)
            if is_finite_number(value):
                total += float(value)
        sums.append({"name": field, "value": total})
    return sums


def sum_by_field_and_year(
    rows: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
) -> dict[str, list[dict[str, Any]]]:
    """Inner ring of per-field totals, outer ring of per-field per-year totals."""
    inner = sum_by_field(rows, fields)

    year_sums: dict[str, dict[str, float]] = {}
    for row in rows:
        timestamp = parse_date(row.get(DATE_KEY))
        if timestamp is None:
            continue
        year = str(timestamp.year)
        for field in fields:
            value = row.get(field)
            if not is_finite_number(value):
                continue
            per_year = year_sums.setdefault(field, {})
            per_year[year] = per_year.get(year, 0.0) + float(value)

    outer: list[dict[str, Any]] = []
    for field in fields:
        per_year = year_sums.get(field)
        if not per_year:
            continue
        for year in sorted(per_year):
            outer.append({"name": f"{field}_{year}", "value": per_year[year], "series": field})

    return {"innerData": inner, "outerData": outer}


def treemap_nodes(
    rows: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
) -> list[dict[str, Any]]:
    nodes: list[dict[str, Any]] = []
    for field in fields:
        children: list[dict[str, Any]] = []
        for row in rows:
            value = row.get(field)
            if not is_finite_number(value):
                continue
            size = abs(float(value))
            if size > 0:
                children.append(
                    {
                        "name": row.get(DATE_DISPLAY_KEY) or row.get(DATE_KEY) or "",
                        "size": size,
                        "seriesName": field,
                    }
                )
        if children:
            nodes.append({"name": field, "children": children})
    return nodes


def to_scatter_points(outliers: Sequence[OutlierRecord]) -> list[dict[str, Any]]:
    return [
        {"x": outlier.date_display, "y": outlier.value, "field": outlier.field}
        for outlier in outliers
    ]
