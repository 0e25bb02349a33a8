import secrets

from fastapi import Header, HTTPException, Query

from app.core.settings import settings
from app.pricing.service import PriceService
from app.store.factory import build_store


def get_price_service() -> PriceService:
    return PriceService(build_store(settings))


def _secret_matches(candidate: str) -> bool:
    expected = settings.CRON_SECRET
    if not expected or not candidate:
        return False
    return secrets.compare_digest(candidate.encode(), expected.encode())


def _bearer_token(authorization: str) -> str:
    if not authorization.startswith("Bearer "):
        return ""
    return authorization.removeprefix("Bearer ").strip()


async def require_cron_secret(authorization: str = Header(default="")) -> None:
    if not _secret_matches(_bearer_token(authorization)):
        raise HTTPException(status_code=401, detail="Unauthorized")


async def require_admin_secret(
    authorization: str = Header(default=""),
    secret: str = Query(default="", description="CRON_SECRET, if not sent as a Bearer token"),
) -> None:
    if not (_secret_matches(_bearer_token(authorization)) or _secret_matches(secret)):
        raise HTTPException(
            status_code=401,
            detail="Unauthorized - include ?secret=YOUR_CRON_SECRET",
        )
