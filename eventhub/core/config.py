# eventhub/core/config.py
import logging
import os
from pathlib import Path
from typing import List, Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_MAP_IMAGE_URL, DEFAULT_SUPABASE_BUCKETS

logger = logging.getLogger(__name__)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


_PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = _PROJECT_ROOT / ".env"
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


PROD_ENVIRONMENTS = {"prod", "production", "live"}

_DEFAULT_SECRET_KEY = SecretStr("dev-only-secret-key-change-me")


class Settings(BaseSettings):
    # Auth
    secret_key: SecretStr = Field(
        default=_DEFAULT_SECRET_KEY,
        description="Secret key for JWT tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours

    environment: str = Field(
        default="development",
        description="Deployment environment (development|test|production)",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Database
    database_url: str = Field(
        default="sqlite:///./eventhub.db",
        description="SQLAlchemy database URL",
    )
    auto_create_tables: bool = Field(
        default=True,
        description="Create missing tables on startup (disable when migrations own the schema)",
    )

    # Supabase Storage (primary reference-image store)
    supabase_url: str = Field(default="", description="Supabase project URL")
    supabase_service_key: SecretStr = Field(
        default=SecretStr(""), description="Supabase service role key"
    )
    supabase_buckets_raw: str = Field(
        default=",".join(DEFAULT_SUPABASE_BUCKETS),
        validation_alias="SUPABASE_BUCKETS",
        description="Comma-separated buckets tried in order for reference-image uploads",
    )

    # S3-compatible storage (secondary reference-image store)
    s3_bucket_name: str = Field(default="", description="S3 bucket name")
    s3_bucket_folder: str = Field(default="", description="Key prefix inside the bucket")
    s3_region: str = Field(default="us-east-1", description="S3 region used for signing")
    s3_endpoint_host: str = Field(
        default="",
        description="Override host (defaults to <bucket>.s3.<region>.amazonaws.com)",
    )
    s3_access_key_id: str = Field(default="", description="S3 access key ID")
    s3_secret_access_key: SecretStr = Field(
        default=SecretStr(""), description="S3 secret access key"
    )
    s3_public_base_url: str = Field(
        default="",
        description="Base URL for publicly served objects (defaults to the endpoint URL)",
    )

    # Local uploads (non-production fallback)
    uploads_dir: str = Field(default="uploads", description="Directory for local uploads")
    local_uploads_only: bool = Field(
        default=False,
        description="Skip remote stores and always write reference images to disk",
    )

    upload_timeout_seconds: float = Field(default=30.0, gt=0)
    upload_delay_seconds: float = Field(default=0.5, ge=0)

    map_image_placeholder_url: str = DEFAULT_MAP_IMAGE_URL

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def _normalize_environment(cls, v: str) -> str:
        return (v or "development").strip().lower()

    @property
    def supabase_buckets(self) -> List[str]:
        return [part.strip() for part in self.supabase_buckets_raw.split(",") if part.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment in PROD_ENVIRONMENTS

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key.get_secret_value())

    @property
    def s3_configured(self) -> bool:
        return bool(
            self.s3_bucket_name
            and self.s3_access_key_id
            and self.s3_secret_access_key.get_secret_value()
        )


settings = Settings()

if settings.is_production and settings.secret_key == _DEFAULT_SECRET_KEY:
    logger.warning("[CONFIG] Running in production with the default secret key")
