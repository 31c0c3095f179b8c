from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Literal, Mapping

DATE_KEY = "date"
DATE_DISPLAY_KEY = "date_display"
RESERVED_KEYS = (DATE_KEY, DATE_DISPLAY_KEY)

Bound = Literal["upper", "lower"]
Row = dict[str, Any]
Domain = tuple[float, float]

DEFAULT_NORMAL_DOMAIN: Domain = (0.0, 100.0)


def is_finite_number(value: Any) -> bool:
    """True for real, finite numbers; bools and numeric strings do not count."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isnan(value)


def row_label(row: Mapping[str, Any]) -> Any:
    return row.get(DATE_DISPLAY_KEY)


@dataclass(frozen=True)
class FieldFence:
    q1: float
    q3: float
    lower: float
    upper: float

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1


@dataclass(frozen=True)
class OutlierRecord:
    date_display: Any
    field: str
    value: float
    bound: Bound


@dataclass(frozen=True)
class MissingRecord:
    date_display: Any
    field: str


@dataclass(frozen=True)
class DetectionResult:
    outliers: list[OutlierRecord]
    missing: list[MissingRecord]


@dataclass(frozen=True)
class Region:
    data: list[Row]
    domain: Domain
    has_data: bool = False


@dataclass(frozen=True)
class ClassifiedDataset:
    upper: Region
    normal: Region
    lower: Region

    @property
    def has_upper(self) -> bool:
        return self.upper.has_data

    @property
    def has_lower(self) -> bool:
        return self.lower.has_data


@dataclass(frozen=True)
class RegionHeights:
    upper: float
    normal: float
    lower: float

    @property
    def total(self) -> float:
        return self.upper + self.normal + self.lower


@dataclass(frozen=True)
class SeriesFence:
    field: str
    q1: float
    q3: float
    lower: float
    upper: float


@dataclass(frozen=True)
class DataQualityResult:
    fences: dict[str, FieldFence]
    outliers: list[OutlierRecord]
    missing: list[MissingRecord]


@dataclass(frozen=True)
class ExtendedAnalysisResult:
    fences: dict[str, FieldFence]
    outliers: list[OutlierRecord]
    missing: list[MissingRecord]
    classified: ClassifiedDataset | None
    has_upper_outliers: bool
    has_lower_outliers: bool
    series_fences: list[SeriesFence] = field(default_factory=list)
    left_classified: ClassifiedDataset | None = None
    right_classified: ClassifiedDataset | None = None
