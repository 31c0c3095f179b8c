from __future__ import annotations

import pytest

from splitchart.analysis.layout import compute_region_heights
from splitchart.analysis.records import ClassifiedDataset, Region


def _classified(has_upper: bool, has_lower: bool) -> ClassifiedDataset:
    row = {"date": "2024-01-01", "date_display": "24-01-01", "v": 1}
    return ClassifiedDataset(
        upper=Region(data=[row] if has_upper else [], domain=(20.0, 30.0), has_data=has_upper),
        normal=Region(data=[row], domain=(0.0, 10.0), has_data=True),
        lower=Region(data=[row] if has_lower else [], domain=(-20.0, -10.0), has_data=has_lower),
    )


def test_heights_give_everything_to_normal_without_outliers() -> None:
    heights = compute_region_heights(_classified(False, False), total_height=400)

    assert (heights.upper, heights.normal, heights.lower) == (0.0, 400.0, 0.0)


def test_heights_reserve_thirty_percent_for_single_outlier_region() -> None:
    upper_only = compute_region_heights(_classified(True, False), total_height=400)
    lower_only = compute_region_heights(_classified(False, True), total_height=400)

    assert upper_only.upper == pytest.approx(120.0)
    assert upper_only.normal == pytest.approx(280.0)
    assert upper_only.lower == 0.0
    assert lower_only.lower == pytest.approx(120.0)
    assert lower_only.upper == 0.0


def test_heights_split_outlier_share_when_both_regions_exist() -> None:
    heights = compute_region_heights(_classified(True, True), total_height=400)

    assert heights.upper == pytest.approx(60.0)
    assert heights.lower == pytest.approx(60.0)
    assert heights.normal == pytest.approx(280.0)


def test_heights_clamp_outlier_regions_to_min_height() -> None:
    heights = compute_region_heights(_classified(True, True), total_height=200)

    assert heights.upper == 50.0
    assert heights.lower == 50.0
    assert heights.normal == pytest.approx(100.0)


def test_heights_normal_region_never_goes_negative() -> None:
    heights = compute_region_heights(_classified(True, True), total_height=80, min_height=50)

    assert heights.normal == 0.0
    assert heights.total == 100.0


@pytest.mark.parametrize("has_upper", [True, False])
@pytest.mark.parametrize("has_lower", [True, False])
@pytest.mark.parametrize("total_height", [150, 333, 400, 1080])
def test_heights_sum_to_total(has_upper: bool, has_lower: bool, total_height: int) -> None:
    heights = compute_region_heights(_classified(has_upper, has_lower), total_height)

    assert heights.upper + heights.normal + heights.lower == pytest.approx(total_height)
