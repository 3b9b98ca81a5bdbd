"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # Postgres: when unset the app runs on in-memory repositories (dev/demo only)
    DATABASE_URL: str | None = None

    # Object storage (Supabase-compatible REST API); unset -> images are inlined as data URLs
    STORAGE_URL: str | None = None
    STORAGE_SERVICE_KEY: SecretStr | None = None
    STORAGE_BUCKET: str = "uploads"
    STORAGE_REQUEST_TIMEOUT_SEC: float = 30.0
    UPLOAD_MAX_BYTES: int = 5 * 1024 * 1024

    # Accounts registering with one of these usernames become admin/premium
    BOOTSTRAP_ADMIN_USERNAMES: list[str] = ["admin"]
    # Richer deployment variant: masters may create/update/delete content too
    MASTER_CAN_MANAGE_CONTENT: bool = True
    # Insert the starter catalog at startup when the content store is empty
    SEED_DEFAULT_CONTENT: bool = True

    # JWT authentication
    JWT_SECRET: SecretStr = SecretStr("change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 1440
    BCRYPT_ROUNDS: int = 12

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL (e.g. postgresql:// or postgresql+psycopg2://)"
            )
        return v.strip()

    @field_validator("STORAGE_URL")
    @classmethod
    def validate_storage_url(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        s = v.strip().rstrip("/").lower()
        if not (s.startswith("http://") or s.startswith("https://")):
            raise ValueError(
                "STORAGE_URL must use http or https (e.g. https://your-project.supabase.co)"
            )
        return v.strip().rstrip("/")

    @field_validator("STORAGE_BUCKET")
    @classmethod
    def validate_storage_bucket(cls, v: str) -> str:
        if not v or not v.strip() or "/" in v:
            raise ValueError("STORAGE_BUCKET must be a non-empty name without '/'")
        return v.strip()

    @field_validator("STORAGE_REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_storage_timeout(cls, v: float) -> float:
        if v <= 0 or v > 120:
            raise ValueError(
                "STORAGE_REQUEST_TIMEOUT_SEC must be greater than 0 and at most 120"
            )
        return v

    @field_validator("UPLOAD_MAX_BYTES")
    @classmethod
    def validate_upload_max_bytes(cls, v: int) -> int:
        if v < 1 or v > 50 * 1024 * 1024:
            raise ValueError("UPLOAD_MAX_BYTES must be between 1 and 52428800 (50 MB)")
        return v

    @field_validator("BOOTSTRAP_ADMIN_USERNAMES")
    @classmethod
    def validate_bootstrap_usernames(cls, v: list[str]) -> list[str]:
        return [name.strip() for name in v if name and name.strip()]

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ALGORITHM must be set and non-empty")
        return v.strip()

    @field_validator("JWT_EXPIRE_MINUTES")
    @classmethod
    def validate_jwt_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 10080:
            raise ValueError(
                "JWT_EXPIRE_MINUTES must be between 1 and 10080 (1 min to 7 days)"
            )
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 16:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 16")
        return v

    @property
    def storage_configured(self) -> bool:
        if not self.STORAGE_URL or self.STORAGE_SERVICE_KEY is None:
            return False
        return bool(self.STORAGE_SERVICE_KEY.get_secret_value().strip())


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
