from datetime import date as _date
from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.pricing.categories import FuelCategory


class PriceObservation(BaseModel):
    """
    One upstream record. The price is kept as received (string or number);
    the aggregator decides whether it is usable.
    """
    fuelTypeCode: str
    price: Any = None


class CategoryPrices(BaseModel):
    unleaded: float | None = None
    premium: float | None = None
    diesel: float | None = None

    def get(self, category: FuelCategory) -> float | None:
        return getattr(self, category.value)


class DataPoints(BaseModel):
    unleaded: int = Field(default=0, ge=0)
    premium: int = Field(default=0, ge=0)
    diesel: int = Field(default=0, ge=0)


class LatestPriceSnapshot(CategoryPrices):
    lastUpdated: str
    dataPoints: DataPoints = Field(default_factory=DataPoints)


class DailyPriceEntry(CategoryPrices):
    # history entries stay lean: no dataPoints
    date: str

    @field_validator("date")
    @classmethod
    def _iso_date(cls, v: str) -> str:
        return _date.fromisoformat(v).isoformat()


class AveragesBlock(BaseModel):
    last7Days: CategoryPrices = Field(default_factory=CategoryPrices)
    last30Days: CategoryPrices = Field(default_factory=CategoryPrices)


class PriceDocument(BaseModel):
    latest: LatestPriceSnapshot
    averages: AveragesBlock = Field(default_factory=AveragesBlock)
    history: list[DailyPriceEntry] = Field(default_factory=list)  # newest first
    lastUpdated: str


class FallbackPriceDocument(PriceDocument):
    fallback: bool = True
    message: str = "Using default prices due to cache error"
