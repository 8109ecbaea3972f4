import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    app_name: str = "Port Console Navigation API"
    debug: bool = False
    console_api_base_url: str = "http://127.0.0.1:8001"
    auto_create_tables: bool = True

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("debug", mode="before")
    @classmethod
    def _coerce_debug(cls, value):
        if isinstance(value, bool) or value is None:
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in {"1", "true", "yes", "on"}:
                return True
            if normalized in {"0", "false", "no", "off"}:
                return False
            # Treat common logging level strings as non-debug defaults instead of erroring.
            if normalized in {"warn", "warning", "info", "error", "critical"}:
                return False
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
