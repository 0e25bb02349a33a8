import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from app.api.deps import get_price_service, require_admin_secret, require_cron_secret
from app.pricing.errors import FuelPriceError
from app.pricing.service import PriceService
from app.pricing.timeutil import iso_timestamp, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


# Vercel-style cron triggers issue GET; manual triggers tend to POST.
@router.api_route("/refresh-fuel-prices", methods=["GET", "POST"], dependencies=[Depends(require_cron_secret)])
async def refresh_fuel_prices(svc: PriceService = Depends(get_price_service)):
    logger.info("Refresh triggered")
    try:
        document = await svc.refresh_from_upstream()
    except FuelPriceError as e:
        logger.exception("Fuel price refresh failed")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})
    except Exception as e:
        logger.exception("Unexpected error during fuel price refresh")
        return JSONResponse(status_code=500, content={"success": False, "error": f"{type(e).__name__}: {e}"})

    return {
        "success": True,
        "message": "Fuel prices refreshed successfully",
        "prices": document.latest.model_dump(mode="json"),
        "historyDays": len(document.history),
        "timestamp": iso_timestamp(utcnow()),
    }


@router.get("/fuel-data/debug", dependencies=[Depends(require_admin_secret)])
async def debug_fuel_data(svc: PriceService = Depends(get_price_service)):
    try:
        info = await svc.describe()
    except FuelPriceError as e:
        logger.exception("Debug read failed")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    if info is None:
        raise HTTPException(status_code=404, detail="No data found: fuel price key is empty")

    return {"success": True, **info, "timestamp": iso_timestamp(utcnow())}


@router.post("/populate-dummy-data", dependencies=[Depends(require_admin_secret)])
async def populate_dummy_data(
    days: int = Query(90, ge=1, le=365),
    svc: PriceService = Depends(get_price_service),
):
    try:
        document = await svc.seed(days)
    except FuelPriceError as e:
        logger.exception("Populating dummy data failed")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    return {
        "success": True,
        "message": "Dummy data populated successfully",
        "data": {
            "daysGenerated": days,
            "daysRetained": len(document.history),
            "latest": document.latest.model_dump(mode="json"),
            "averages": document.averages.model_dump(mode="json"),
        },
    }
