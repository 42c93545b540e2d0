"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - The cipher key is derived from cipher_secret + cipher_salt, never a code literal
    - get_settings() is cached (lru_cache) — single instance per process
    - chain_difficulty bounded 1-8 (each step multiplies mining work by 16)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - The default cipher_secret is a development placeholder; every deployment
      must set NOTECHAIN_CIPHER_SECRET (and ideally a per-install salt)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from NOTECHAIN_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="NOTECHAIN_", env_file=".env", case_sensitive=False,
    )

    # Database (key-value note store)
    database_url: str = "sqlite+aiosqlite:///./notechain.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_sqlite_url(cls, v: str) -> str:
        """Plain sqlite:// URLs need the async driver."""
        if isinstance(v, str) and v.startswith("sqlite:///"):
            return v.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return v

    # Cipher
    cipher_secret: str = "notechain-development-secret"
    cipher_salt: str = "notechain-default-salt"
    cipher_kdf_iterations: int = Field(390_000, ge=1)

    # Chain
    chain_difficulty: int = Field(2, ge=1, le=8)
    # None = unbounded nonce search
    mining_max_iterations: int | None = Field(None, ge=1)

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
