from __future__ import annotations

from typing import Any, Mapping, Sequence

from splitchart.analysis.records import (
    DetectionResult,
    FieldFence,
    MissingRecord,
    OutlierRecord,
    is_finite_number,
    is_missing,
    row_label,
)


def classify_value(value: Any, fence: FieldFence | None) -> str | None:
    """Return "missing", "upper", "lower" or None for an in-range / unusable value."""
    if is_missing(value):
        return "missing"
    if fence is None or not is_finite_number(value):
        return None
    if value < fence.lower:
        return "lower"
    if value > fence.upper:
        return "upper"
    return None


def detect_outliers_and_missing(
    rows: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
    fences: Mapping[str, FieldFence],
) -> DetectionResult:
    outliers: list[OutlierRecord] = []
    missing: list[MissingRecord] = []

    for row in rows:
        label = row_label(row)
        for field in fields:
            value = row.get(field)
            state = classify_value(value, fences.get(field))
            if state == "missing":
                missing.append(MissingRecord(date_display=label, field=field))
            elif state in ("upper", "lower"):
                outliers.append(
                    OutlierRecord(
                        date_display=label,
                        field=field,
                        value=float(value),
                        bound=state,
                    )
                )
    return DetectionResult(outliers=outliers, missing=missing)
