from fastapi import APIRouter, Depends, Response

from app.api.deps import get_price_service
from app.pricing.models import FallbackPriceDocument
from app.pricing.service import PriceService

router = APIRouter()

CACHE_CONTROL = "s-maxage=3600, stale-while-revalidate"


@router.get("/fuel-prices")
async def fuel_prices(response: Response, svc: PriceService = Depends(get_price_service)):
    document = await svc.read()

    if isinstance(document, FallbackPriceDocument):
        response.headers["Cache-Control"] = "no-store"
    else:
        response.headers["Cache-Control"] = CACHE_CONTROL

    return document.model_dump(mode="json")
