from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration
    api_v1_prefix: str = Field(default="/api/v1")
    api_title: str = Field(default="CAS Statement Extractor")
    api_version: str = Field(default="1.0.0")
    # Empty falls back to the per-environment default
    log_level: str = Field(default="")

    # Environment (development, staging, production, test)
    environment: str = Field(default="development")

    # Upload gateway
    max_upload_size_bytes: int = Field(default=10 * 1024 * 1024, gt=0)

    # Per-account parsing fan-out; 1 keeps the loop sequential
    account_workers: int = Field(default=1, ge=1, le=32)

    # CORS
    cors_origins: Union[str, List[str]] = Field(default="http://localhost:3000")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            # Handle comma-separated string
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


settings = Settings()
