from functools import lru_cache
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from securepass.core.pagination import DEFAULT_PAGE_SIZE, check_page_size


class ClientSettings(BaseSettings):
    SERVER_URL: str = "http://127.0.0.1:8000"
    REQUEST_TIMEOUT: float = 10.0
    DEFAULT_PAGE_SIZE: int = DEFAULT_PAGE_SIZE
    # set to use a local SQLite vault instead of the server
    LOCAL_DB: str | None = None
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="SECUREPASS_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("DEFAULT_PAGE_SIZE")
    @classmethod
    def allowed_page_size(cls, value: int) -> int:
        return check_page_size(value)

    @field_validator("SERVER_URL")
    @classmethod
    def strip_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache
def get_client_settings():
    return ClientSettings()
