# app/db/session.py
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine
from sqlalchemy import event
from sqlalchemy.pool import StaticPool

from app.core.settings import settings


def make_engine(url: str) -> AsyncEngine:
    connect_args = {}
    engine_kwargs = {}

    if url.startswith("sqlite"):
        connect_args = {"timeout": 30, "check_same_thread": False}
        engine_kwargs["poolclass"] = StaticPool  # IMPORTANT for sqlite dev

    eng = create_async_engine(url, connect_args=connect_args, **engine_kwargs)

    if url.startswith("sqlite"):
        @event.listens_for(eng.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.execute("PRAGMA synchronous=NORMAL;")
            cursor.execute("PRAGMA busy_timeout=30000;")  # 30 seconds
            cursor.close()

    return eng


engine = make_engine(settings.DB_URL)

SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
