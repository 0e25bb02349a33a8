from typing import Sequence

from app.pricing.categories import FuelCategory
from app.pricing.models import AveragesBlock, CategoryPrices, DailyPriceEntry

SHORT_WINDOW_DAYS = 7
LONG_WINDOW_DAYS = 30


def rolling_average(history: Sequence[DailyPriceEntry], window: int) -> CategoryPrices:
    """
    Per-category mean over the ``window`` most recent entries.

    Days missing a category are skipped for that category only, so the divisor
    is the number of days that actually had a price, not the window size.
    """
    recent = history[: max(window, 0)]
    out: dict[str, float | None] = {}
    for category in FuelCategory:
        values = [v for v in (e.get(category) for e in recent) if v is not None]
        out[category.value] = sum(values) / len(values) if values else None
    return CategoryPrices(**out)


def compute_averages(history: Sequence[DailyPriceEntry]) -> AveragesBlock:
    return AveragesBlock(
        last7Days=rolling_average(history, SHORT_WINDOW_DAYS),
        last30Days=rolling_average(history, LONG_WINDOW_DAYS),
    )
