"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from decimal import Decimal
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from solders.pubkey import Pubkey

from app.config.business_constants import (
    DEFAULT_FEE_BUFFER_SOL,
    DEFAULT_PAYMENT_AMOUNT_SOL,
    DEFAULT_PAYMENT_RECIPIENT,
)
from app.config.constants import (
    DB_OPERATION_TIMEOUT,
    MAX_LOGO_SIZE_BYTES,
    SIGNING_TIMEOUT,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False
    db_operation_timeout: float = Field(
        default=DB_OPERATION_TIMEOUT,
        gt=0,
        description="Seconds before a token insert is treated as persistence failure",
    )

    # Solana RPC
    solana_rpc_url: str = "https://api.mainnet-beta.solana.com"
    solana_commitment: str = "confirmed"

    # Payment (fixed fee for a token page)
    payment_amount_sol: Decimal = Field(
        default=DEFAULT_PAYMENT_AMOUNT_SOL,
        gt=0,
        description="Flat fee in SOL transferred to the platform wallet",
    )
    payment_fee_buffer_sol: Decimal = Field(
        default=DEFAULT_FEE_BUFFER_SOL,
        ge=0,
        description="Extra SOL required on top of the fee to cover network fees",
    )
    payment_recipient_address: str = DEFAULT_PAYMENT_RECIPIENT
    payment_signing_timeout: float = Field(
        default=SIGNING_TIMEOUT,
        gt=0,
        description="Seconds to wait for the wallet to sign and send",
    )
    payment_require_confirmation: bool = False

    # API client
    api_base_url: str = "http://localhost:5000"
    public_base_url: str = "http://localhost:5000"

    # Uploads
    upload_dir: Path = Path("uploads")
    max_logo_size_bytes: int = Field(default=MAX_LOGO_SIZE_BYTES, gt=0)

    # Redis (for Dramatiq)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Reconciliation of pending token records
    reconciliation_max_retries: int = Field(default=8, ge=0)
    reconciliation_min_backoff_ms: int = Field(default=5_000, gt=0)
    reconciliation_max_backoff_ms: int = Field(default=600_000, gt=0)

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "logs/mememarketer.log"
    host: str = "0.0.0.0"
    port: int = Field(default=5000, ge=1, le=65535)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production' and self.debug:
            raise ValueError(
                'DEBUG must be False in production environment. '
                'Set DEBUG=false in your .env file.'
            )
        if self.reconciliation_min_backoff_ms > self.reconciliation_max_backoff_ms:
            raise ValueError(
                'RECONCILIATION_MIN_BACKOFF_MS must not exceed RECONCILIATION_MAX_BACKOFF_MS'
            )
        return self

    @field_validator('payment_recipient_address')
    @classmethod
    def validate_recipient_address(cls, v: str) -> str:
        """Validate platform recipient is a Solana public key."""
        v = v.strip()
        try:
            Pubkey.from_string(v)
        except ValueError as e:
            raise ValueError(f'Invalid Solana recipient address: {e}') from e
        return v

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(('postgresql://', 'postgresql+asyncpg://')):
            raise ValueError(
                'DATABASE_URL must start with postgresql:// or postgresql+asyncpg://'
            )
        if v.startswith('postgresql://'):
            v = v.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return v

    @property
    def redis_url(self) -> str:
        """Redis URL for the task broker."""
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    def log_summary(self) -> None:
        """Log non-secret settings at startup."""
        logger.info(
            f"Environment: {self.environment}, RPC: {self.solana_rpc_url}, "
            f"fee: {self.payment_amount_sol} SOL (+{self.payment_fee_buffer_sol} buffer)"
        )


# Global settings instance
settings = Settings()
