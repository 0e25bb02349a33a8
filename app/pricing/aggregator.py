"""
Median aggregation of raw FuelCheck observations.

Every observation is bucketed into its canonical category through the static
code table, invalid prices (non-numeric, zero, negative) are dropped as noise,
and the median of what remains becomes the category price.
"""
import math
from collections import defaultdict
from datetime import datetime
from typing import Iterable

from app.pricing.categories import FuelCategory, category_for_code
from app.pricing.models import DataPoints, LatestPriceSnapshot, PriceObservation
from app.pricing.timeutil import iso_timestamp, utcnow


def valid_price(raw) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        price = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def median(values: Iterable[float]) -> float | None:
    ordered = sorted(values)
    n = len(ordered)
    if n == 0:
        return None
    mid = n // 2
    if n % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def bucket_prices(observations: Iterable[PriceObservation]) -> dict[FuelCategory, list[float]]:
    buckets: dict[FuelCategory, list[float]] = defaultdict(list)
    for obs in observations:
        category = category_for_code(obs.fuelTypeCode)
        if category is None:
            continue
        price = valid_price(obs.price)
        if price is not None:
            buckets[category].append(price)
    return buckets


def aggregate(
    observations: Iterable[PriceObservation],
    *,
    now: datetime | None = None,
) -> LatestPriceSnapshot:
    """Reduce raw observations to one median price per category."""
    now = now or utcnow()
    buckets = bucket_prices(observations)

    prices = {c.value: median(buckets.get(c, [])) for c in FuelCategory}
    counts = {c.value: len(buckets.get(c, [])) for c in FuelCategory}

    return LatestPriceSnapshot(
        **prices,
        lastUpdated=iso_timestamp(now),
        dataPoints=DataPoints(**counts),
    )
