import asyncio
import logging

from app.core.settings import settings
from app.pricing.service import PriceService
from app.store.factory import build_store

logger = logging.getLogger(__name__)


async def start_scheduler(svc: PriceService | None = None):
    """In-process stand-in for the daily cron trigger."""
    svc = svc or PriceService(build_store(settings))

    while True:
        try:
            await svc.refresh_from_upstream()
        except Exception:
            # keep serving the last good document; try again next interval
            logger.exception("Scheduled fuel price refresh failed")

        await asyncio.sleep(settings.REFRESH_INTERVAL_SECONDS)
