from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    NSW_API_URL: str = "https://api.onegov.nsw.gov.au/FuelPriceCheck/v1/fuel/prices"
    NSW_API_KEY: str = ""
    NSW_API_SECRET: str = ""

    # shared secret for the cron trigger and admin endpoints
    CRON_SECRET: str = ""

    STORE_BACKEND: str = "sql"  # "sql" | "edge_config"
    DB_URL: str = "sqlite+aiosqlite:///./fuel_prices.db"

    EDGE_CONFIG_ID: str = ""
    EDGE_CONFIG_TOKEN: str = ""
    EDGE_CONFIG_URL: str = "https://edge-config.vercel.com"
    VERCEL_TOKEN: str = ""
    VERCEL_API_URL: str = "https://api.vercel.com"

    PRICE_DOCUMENT_KEY: str = "fuel_prices"
    RETENTION_DAYS: int = 30
    HTTP_TIMEOUT_SECONDS: float = 30.0

    REFRESH_ON_SCHEDULE: bool = False
    REFRESH_INTERVAL_SECONDS: int = 86400

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
