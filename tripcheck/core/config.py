# tripcheck/core/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (.env file).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Trip Profitability API"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Mapbox geocoding + directions
    MAPBOX_ACCESS_TOKEN: str = ""
    MAPBOX_BASE_URL: str = "https://api.mapbox.com"
    GEOCODING_COUNTRY: str = "ar"
    GEOCODING_LIMIT: int = 5
    MIN_QUERY_LENGTH: int = 3
    ROUTING_PROFILE: str = "driving"
    HTTP_TIMEOUT_S: float = 10.0

    # Supabase (PostgREST) persistence
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    TRIP_ANALYSIS_TABLE: str = "trip_analysis"

    # How long a user notification stays visible, in seconds
    NOTIFICATION_TTL_S: float = 3.0


settings = Settings()
