# app/core/config.py

from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # MongoDB settings
    MONGODB_URI: str = Field(default="mongodb://localhost:27017")
    MONGODB_DB: str = Field(default="lexipic")

    # Auth/JWT settings
    SECRET_KEY: str = Field(default="change-me-in-production")
    JWT_ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24 * 7)

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO")

    # HTTP settings
    API_PREFIX: str = Field(default="/api")
    CORS_ORIGINS: List[str] = Field(default=["*"])

    # ARASAAC settings
    ARASAAC_API_URL: str = Field(default="https://api.arasaac.org/api")
    ARASAAC_STATIC_URL: str = Field(default="https://static.arasaac.org/pictograms")
    ARASAAC_IMAGE_SIZE: int = Field(default=500)
    ARASAAC_TIMEOUT_SECONDS: float = Field(default=5.0)
    ARASAAC_SEARCH_DEADLINE_SECONDS: float = Field(default=10.0)

    # Pictogram pipeline settings
    MAX_PICTOGRAMS: int = Field(default=6)
    DEFAULT_LANGUAGE: str = Field(default="es")
    PICTOGRAM_CONCURRENT_SEARCH: bool = Field(default=True)

    # Broadcast room settings
    MESSAGES_DEFAULT_LIMIT: int = Field(default=50)
    MESSAGES_MAX_LIMIT: int = Field(default=200)

settings = Settings()
