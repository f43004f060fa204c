# Server settings: database url, token signing, password hashing
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "SecurePass Server"
    API_V1_STR: str = "/api/v1"

    # Signs access and reset tokens. The default is for local development only.
    SECRET_KEY: str = "INSECURE_DEFAULT_KEY_PLEASE_CHANGE_ME"
    ALGORITHM: str = "HS256"

    # 30 days
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 43200
    RESET_TOKEN_EXPIRE_MINUTES: int = 30

    PASSWORD_HASH_ITERATIONS: int = 600000

    DATABASE_URL: str = "sqlite:///./securepass.db"
    DATABASE_ECHO: bool = False

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings():
    return Settings()


settings = get_settings()
