from app.core.settings import Settings, settings as default_settings
from app.store.base import KeyValueStore, PriceHistoryStore


def build_kv_store(settings: Settings) -> KeyValueStore:
    backend = settings.STORE_BACKEND.strip().lower()

    if backend == "edge_config":
        from app.store.edge_config import EdgeConfigStore

        return EdgeConfigStore(
            config_id=settings.EDGE_CONFIG_ID,
            read_token=settings.EDGE_CONFIG_TOKEN,
            api_token=settings.VERCEL_TOKEN,
            read_url=settings.EDGE_CONFIG_URL,
            api_url=settings.VERCEL_API_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )

    if backend == "sql":
        from app.db.session import SessionLocal
        from app.store.sql import SqlKeyValueStore

        return SqlKeyValueStore(SessionLocal)

    raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND!r}")


def build_store(settings: Settings = default_settings) -> PriceHistoryStore:
    return PriceHistoryStore(build_kv_store(settings), settings.PRICE_DOCUMENT_KEY)
