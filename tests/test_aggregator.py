# tests/test_aggregator.py
from datetime import datetime, timezone

import pytest

from app.pricing.aggregator import aggregate, median, valid_price
from app.pricing.categories import FuelCategory, category_for_code
from app.pricing.models import PriceObservation


def _obs(code, price):
    return PriceObservation(fuelTypeCode=code, price=price)


def test_median_odd_takes_middle_value():
    assert median([185.0, 180.0, 182.5]) == 182.5


def test_median_even_averages_two_middle_values():
    assert median([185.0, 180.0]) == 182.5
    assert median([1.0, 4.0, 2.0, 3.0]) == 2.5


def test_median_empty_is_none():
    assert median([]) is None


@pytest.mark.parametrize("raw", [None, "", "abc", 0, "0", -12.5, "-1", float("nan"), float("inf"), True, 10**400])
def test_valid_price_rejects_noise(raw):
    assert valid_price(raw) is None


def test_valid_price_accepts_numeric_strings():
    assert valid_price("183.9") == 183.9
    assert valid_price(" 190 ") == 190.0
    assert valid_price(201) == 201.0


def test_category_table():
    assert category_for_code("U91") is FuelCategory.UNLEADED
    assert category_for_code("e10") is FuelCategory.UNLEADED
    assert category_for_code("P98") is FuelCategory.PREMIUM
    assert category_for_code(" DL ") is FuelCategory.DIESEL
    assert category_for_code("LPG") is None
    assert category_for_code(None) is None


def test_aggregate_end_to_end_scenario():
    snap = aggregate(
        [_obs("U91", 180.1), _obs("E10", 179.9), _obs("P95", 205.0), _obs("DL", 190.0)],
        now=datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc),
    )

    assert snap.unleaded == pytest.approx(180.0)
    assert snap.premium == 205.0
    assert snap.diesel == 190.0
    assert snap.dataPoints.model_dump() == {"unleaded": 2, "premium": 1, "diesel": 1}
    assert snap.lastUpdated == "2026-03-10T09:30:00.000Z"


def test_aggregate_merges_both_premium_grades():
    snap = aggregate([_obs("P95", 200.0), _obs("P98", 210.0), _obs("P98", 214.0)])
    assert snap.premium == 210.0
    assert snap.dataPoints.premium == 3


def test_aggregate_filters_invalid_before_median():
    snap = aggregate([_obs("U91", 180.0), _obs("U91", 0), _obs("U91", "n/a"), _obs("U91", 184.0)])
    assert snap.unleaded == 182.0
    assert snap.dataPoints.unleaded == 2


def test_category_with_only_invalid_observations_is_null():
    snap = aggregate([_obs("DL", -1), _obs("DL", "bad"), _obs("U91", 181.0)])
    assert snap.diesel is None
    assert snap.dataPoints.diesel == 0
    assert snap.premium is None
    assert snap.dataPoints.premium == 0
    assert snap.unleaded == 181.0


def test_aggregate_resists_outliers():
    prices = [179.0, 180.0, 181.0, 182.0, 999.9]
    snap = aggregate([_obs("U91", p) for p in prices])
    assert snap.unleaded == 181.0


def test_oversized_price_is_filtered_not_fatal():
    snap = aggregate([_obs("U91", 10**400), _obs("U91", 181.0), _obs("DL", 190.0)])
    assert snap.unleaded == 181.0
    assert snap.dataPoints.unleaded == 1
    assert snap.diesel == 190.0
