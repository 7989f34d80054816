"""Application configuration settings."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_database_url() -> str:
    """Get the default database URL, using the mounted volume path if available."""
    if os.path.isdir("/data"):
        return "sqlite:////data/parcelhub.db"
    return "sqlite:///./parcelhub.db"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "ParcelHub"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Database - defaults to volume path if /data exists
    DATABASE_URL: str = _get_default_database_url()

    # JWT Authentication
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Webpay Plus - defaults point at Transbank's integration environment
    WEBPAY_BASE_URL: str = "https://webpay3gint.transbank.cl"
    WEBPAY_COMMERCE_CODE: str = "597055555532"
    WEBPAY_API_KEY: str = "579B532A7440BB0C9079DED94D31EA1615BACEB56610332264630D42D0A36B1C"
    WEBPAY_RETURN_URL: str = "http://localhost:8000/payments/webpay/commit-trx"
    WEBPAY_TIMEOUT_SECONDS: float = 20.0


settings = Settings()
