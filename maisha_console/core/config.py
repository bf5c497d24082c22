# maisha_console/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized console settings loaded from environment.

    Required env vars (.env):
      - SESSION_SECRET_KEY (signs the session cookie)

    Optional:
      - API_BASE (backend base URL; every call goes to {API_BASE}/api/...)
      - MOPAY_TOKEN (default credential for the customer-info lookup)
    """

    PROJECT_NAME: str = "Maisha App"
    API_PREFIX: str = "/api"

    # Backend REST API
    API_BASE: str = "https://bbesoft.mbanirashop.com"
    API_TIMEOUT: float | None = None

    # Customer-info lookup credential (never mixed with the session token)
    MOPAY_TOKEN: str | None = None

    # Client-side session cookie
    SESSION_SECRET_KEY: str
    SESSION_COOKIE: str = "maisha_session"
    SESSION_MAX_AGE: int = 14 * 24 * 60 * 60

    CURRENCY: str = "RWF"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
