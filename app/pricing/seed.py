"""
Synthetic price history for demo and local development.

Prices follow the weekly cycle typical of Australian capital-city fuel
prices: a sine wave over 7 days, a slight upward drift over the whole period
and a few cents of daily noise, rounded to one decimal like real boards.
"""
import math
import random
from datetime import date, timedelta

from app.pricing.models import DailyPriceEntry, DataPoints

BASE_PRICES = {"unleaded": 182.0, "premium": 205.0, "diesel": 195.0}
CYCLE_PERIOD_DAYS = 7
CYCLE_AMPLITUDE = 15.0
DIESEL_CYCLE_FACTOR = 0.8
TREND_CENTS = 5.0
NOISE_CENTS = 6.0


def generate_history(days: int, today: date, rng: random.Random | None = None) -> list[DailyPriceEntry]:
    rng = rng or random.Random()
    out: list[DailyPriceEntry] = []

    for i in range(days):
        cycle = math.sin((i % CYCLE_PERIOD_DAYS) / CYCLE_PERIOD_DAYS * 2 * math.pi) * CYCLE_AMPLITUDE
        # prices were slightly lower further back
        trend = (i / days) * -TREND_CENTS

        def noise() -> float:
            return (rng.random() - 0.5) * NOISE_CENTS

        out.append(
            DailyPriceEntry(
                date=(today - timedelta(days=i)).isoformat(),
                unleaded=round(BASE_PRICES["unleaded"] + cycle + trend + noise(), 1),
                premium=round(BASE_PRICES["premium"] + cycle + trend + noise(), 1),
                diesel=round(BASE_PRICES["diesel"] + cycle * DIESEL_CYCLE_FACTOR + trend + noise(), 1),
            )
        )
    return out


def synthetic_data_points(rng: random.Random | None = None) -> DataPoints:
    rng = rng or random.Random()
    return DataPoints(
        unleaded=rng.randint(1200, 1500),
        premium=rng.randint(800, 1000),
        diesel=rng.randint(1000, 1250),
    )
