import asyncio
from fastapi import FastAPI
from app.api.router import api
from app.core.logging import configure_logging
from app.core.settings import settings
from app.db.init_db import init_db
from app.ingestion.scheduler import start_scheduler
from fastapi.middleware.cors import CORSMiddleware

app = FastAPI(title="Fuel Price History")


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(api)

@app.on_event("startup")
async def on_startup():
    configure_logging()
    if settings.STORE_BACKEND == "sql":
        await init_db()
    if settings.REFRESH_ON_SCHEDULE:
        # refresh in background; the external cron stays the primary trigger
        asyncio.create_task(start_scheduler())
