from fastapi import APIRouter
from app.api.v1.health import router as health
from app.api.v1.admin_sync import router as admin
from app.api.v1.prices import router as prices


api = APIRouter()

api.include_router(health, prefix="/v1")
api.include_router(prices, prefix="/v1")
api.include_router(admin, prefix="/v1")
