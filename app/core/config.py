"""
Configuration module - centralized settings for the entire application.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To override in production, set environment variables:
        export DATA_DIR=/var/lib/wallcal
        export ADMIN_PASSWORD=your-admin-password
    """

    # ---------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIGURATION
    # ---------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",        # Load from .env file in project root
        env_file_encoding="utf-8",
        extra="ignore",         # Ignore extra env vars not defined here
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    APP_NAME: str = "Wallcal Display"

    # DEBUG: Include exception messages in 500 responses
    DEBUG: bool = False

    # LOG_LEVEL: Root level for the wallcal.* loggers
    LOG_LEVEL: str = "INFO"

    # LOG_DIR: When set, error.log and combined.log are written here
    LOG_DIR: str = ""

    # ---------------------------------------------------------------------------
    # STORAGE
    # ---------------------------------------------------------------------------
    # DATA_DIR: Holds calendars.json and tokens/token.json
    DATA_DIR: str = "data"

    # ---------------------------------------------------------------------------
    # GOOGLE OAUTH SETTINGS
    # ---------------------------------------------------------------------------
    # Google Cloud Console: https://console.cloud.google.com/apis/credentials
    # The redirect URI must match the one registered for the OAuth client.
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REDIRECT_URI: str = "http://localhost:3000/auth/callback"

    # ---------------------------------------------------------------------------
    # ADMIN
    # ---------------------------------------------------------------------------
    # ADMIN_PASSWORD: HTTP Basic password for user "admin"
    # Admin endpoints answer 500 while this is empty.
    ADMIN_PASSWORD: str = ""

    # ---------------------------------------------------------------------------
    # DISPLAY
    # ---------------------------------------------------------------------------
    DISPLAY_TIMEZONE: str = "Asia/Tokyo"
    WEEK_COUNT: int = 4

    # REFRESH_INTERVAL_SECONDS: Period of the background event/weather refresh
    REFRESH_INTERVAL_SECONDS: int = 600

    # ---------------------------------------------------------------------------
    # LIVE RELOAD (Server-Sent Events)
    # ---------------------------------------------------------------------------
    SSE_KEEPALIVE_SECONDS: float = 30.0
    SSE_RECONNECT_MS: int = 5000

    # ---------------------------------------------------------------------------
    # WEATHER (Japan Meteorological Agency XML feed)
    # ---------------------------------------------------------------------------
    WEATHER_FEED_URL: str = "https://www.data.jma.go.jp/developer/xml/feed/regular_l.xml"
    WEATHER_TARGET_AREA: str = "神奈川県府県週間天気予報"
    WEATHER_CACHE_SECONDS: int = 600

    # ---------------------------------------------------------------------------
    # DERIVED PATHS
    # ---------------------------------------------------------------------------
    @property
    def data_dir(self) -> Path:
        return Path(self.DATA_DIR).resolve()

    @property
    def config_path(self) -> Path:
        return self.data_dir / "calendars.json"

    @property
    def token_path(self) -> Path:
        return self.data_dir / "tokens" / "token.json"


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from app.core.config import settings
settings = Settings()
