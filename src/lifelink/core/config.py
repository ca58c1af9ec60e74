from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):

    DYNAMODB_TABLE_NAME: str = "lifelink"
    AWS_REGION: str = "us-east-1"
    AWS_PROFILE: str | None = None
    DYNAMODB_ENDPOINT_URL: str | None = None
    CREATE_TABLE_ON_STARTUP: bool = False

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    # Admin endpoints are open when this is unset
    ADMIN_API_KEY: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()
