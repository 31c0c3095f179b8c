from __future__ import annotations

from typing import Any, Mapping, Sequence

from splitchart.analysis.domains import normal_domain, outlier_domain
from splitchart.analysis.records import (
    DATE_DISPLAY_KEY,
    DATE_KEY,
    Bound,
    ClassifiedDataset,
    FieldFence,
    OutlierRecord,
    Region,
    Row,
)


def index_outliers(outliers: Sequence[OutlierRecord]) -> dict[tuple[Any, str], Bound]:
    # Later records win for a repeated (label, field) pair.
    return {(outlier.date_display, outlier.field): outlier.bound for outlier in outliers}


def classify_by_region(
    rows: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
    fences: Mapping[str, FieldFence],
    outliers: Sequence[OutlierRecord] = (),
    all_fields: Sequence[str] | None = None,
) -> ClassifiedDataset:
    """Split rows into upper/normal/lower regions for a broken-axis chart.

    Every row lands in ``normal`` with its outlier cells set to ``None``.
    Rows holding at least one upper (lower) outlier are also copied, with
    their original values, into ``upper`` (``lower``). Fields listed in
    ``all_fields`` but not in ``fields`` keep their raw values in the normal
    rows, which lets the opposite axis of a dual-axis chart stay visible.
    """
    outlier_index = index_outliers(outliers)
    analyzed = list(fields)
    analyzed_set = set(analyzed)
    passthrough = [field for field in (all_fields or []) if field not in analyzed_set]

    upper_rows: list[Row] = []
    normal_rows: list[Row] = []
    lower_rows: list[Row] = []

    for row in rows:
        label = row.get(DATE_DISPLAY_KEY)
        has_upper = False
        has_lower = False
        normal_row: Row = {
            DATE_KEY: row.get(DATE_KEY),
            DATE_DISPLAY_KEY: label,
        }

        for field in analyzed:
            bound = outlier_index.get((label, field))
            if bound == "upper":
                has_upper = True
                normal_row[field] = None
            elif bound == "lower":
                has_lower = True
                normal_row[field] = None
            else:
                normal_row[field] = row.get(field)

        for field in passthrough:
            normal_row[field] = row.get(field)

        normal_rows.append(normal_row)
        if has_upper:
            upper_rows.append(dict(row))
        if has_lower:
            lower_rows.append(dict(row))

    normal = normal_domain(analyzed, fences)
    upper_values = [outlier.value for outlier in outliers if outlier.bound == "upper"]
    lower_values = [outlier.value for outlier in outliers if outlier.bound == "lower"]

    return ClassifiedDataset(
        upper=Region(
            data=upper_rows,
            domain=outlier_domain("upper", upper_values, normal),
            has_data=bool(upper_rows),
        ),
        normal=Region(data=normal_rows, domain=normal, has_data=bool(normal_rows)),
        lower=Region(
            data=lower_rows,
            domain=outlier_domain("lower", lower_values, normal),
            has_data=bool(lower_rows),
        ),
    )
