"""
Application settings.

Values come from environment variables, with a `.env` file loaded first when
present. Settings are read once at startup and handed to the services that
need them.
"""

import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:3001"


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings(BaseModel):
    """Runtime configuration for the API server."""

    secret_key: str = Field(..., description="Key used to sign access tokens")
    jwt_algorithm: str = Field(default="HS256", description="Token signing algorithm")
    access_token_expire_minutes: int = Field(default=60 * 24 * 7, gt=0)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    database_url: str = "sqlite:///server/pdf2jpg.db"
    upload_dir: str = "server/uploads"
    artifact_url_prefix: str = "/api/files"

    converter: str = Field(default="simulated", description="Conversion strategy name")
    conversion_delay: float = Field(default=2.0, ge=0.0)
    conversion_timeout: float = Field(default=30.0, gt=0.0)

    cors_origins: List[str] = Field(
        default_factory=lambda: _split_origins(DEFAULT_CORS_ORIGINS)
    )

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SECRET_KEY must be set")
        return v


def get_settings() -> Settings:
    """Build settings from the environment."""
    load_dotenv()

    values = {
        "secret_key": os.getenv("SECRET_KEY", ""),
        "jwt_algorithm": os.getenv("JWT_ALGORITHM"),
        "access_token_expire_minutes": os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES"),
        "bcrypt_rounds": os.getenv("BCRYPT_ROUNDS"),
        "database_url": os.getenv("DATABASE_URL"),
        "upload_dir": os.getenv("UPLOAD_DIR"),
        "artifact_url_prefix": os.getenv("ARTIFACT_URL_PREFIX"),
        "converter": os.getenv("CONVERTER"),
        "conversion_delay": os.getenv("CONVERSION_DELAY"),
        "conversion_timeout": os.getenv("CONVERSION_TIMEOUT"),
    }
    if os.getenv("CORS_ORIGINS"):
        values["cors_origins"] = _split_origins(os.getenv("CORS_ORIGINS"))

    # Unset variables fall back to the field defaults
    return Settings(**{k: v for k, v in values.items() if v is not None})


def get_cors_origins() -> List[str]:
    """Allowed CORS origins, needed before the rest of the settings are loaded."""
    load_dotenv()
    return _split_origins(os.getenv("CORS_ORIGINS") or DEFAULT_CORS_ORIGINS)
