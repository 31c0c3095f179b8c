from __future__ import annotations

from typing import Any, Mapping, Sequence

import numpy as np

from splitchart.analysis.records import FieldFence, is_finite_number

IQR_MULTIPLIER = 1.5
MIN_FENCE_SAMPLES = 4


def finite_values(rows: Sequence[Mapping[str, Any]], field: str) -> np.ndarray:
    values = [row.get(field) for row in rows]
    return np.asarray([float(value) for value in values if is_finite_number(value)], dtype=float)


def fence_from_values(values: np.ndarray) -> FieldFence | None:
    """Nearest-rank Tukey fence; None below MIN_FENCE_SAMPLES observations.

    Quartiles are taken at index floor(n * 0.25) and floor(n * 0.75) of the
    sorted sample, without interpolation.
    """
    if values.size < MIN_FENCE_SAMPLES:
        return None

    ordered = np.sort(values, kind="mergesort")
    n = ordered.size
    q1 = float(ordered[int(np.floor(n * 0.25))])
    q3 = float(ordered[int(np.floor(n * 0.75))])
    iqr = q3 - q1
    return FieldFence(
        q1=q1,
        q3=q3,
        lower=q1 - IQR_MULTIPLIER * iqr,
        upper=q3 + IQR_MULTIPLIER * iqr,
    )


def compute_fences(
    rows: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
) -> dict[str, FieldFence]:
    fences: dict[str, FieldFence] = {}
    for field in fields:
        fence = fence_from_values(finite_values(rows, field))
        if fence is not None:
            fences[field] = fence
    return fences
