# app/db/init_db.py
from sqlalchemy.ext.asyncio import AsyncEngine

from app.db.base import Base
from app.db.session import engine as default_engine

# IMPORTANT: import models so SQLAlchemy registers tables before create_all()
from app.db.models import documents  # noqa: F401

async def init_db(engine: AsyncEngine | None = None):
    async with (engine or default_engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
