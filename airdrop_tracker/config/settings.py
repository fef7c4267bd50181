"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from airdrop_tracker.config.constants import (
    ADMIN_WALLET_ADDRESS,
    CLAIM_CONTRACT_ADDRESS,
    DEFAULT_GENESIS_BLOCK,
    DEFAULT_RPC_URL,
    DISTRIBUTION_WALLET_ADDRESS,
    W0G_TOKEN_ADDRESS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/airdrop.db"
    database_echo: bool = False

    # Chain RPC
    rpc_url: str = DEFAULT_RPC_URL
    rpc_timeout: float = Field(
        default=30.0, gt=0, description="Timeout per RPC call in seconds"
    )

    # Watched entities
    claim_contract_address: str = CLAIM_CONTRACT_ADDRESS
    token_address: str = W0G_TOKEN_ADDRESS
    admin_wallet_address: str = ADMIN_WALLET_ADDRESS
    distribution_wallet_address: str = DISTRIBUTION_WALLET_ADDRESS

    claim_genesis_block: int = Field(
        default=DEFAULT_GENESIS_BLOCK,
        ge=0,
        description="First block scanned for claim events when no checkpoint exists",
    )
    wallet_genesis_block: int = Field(
        default=DEFAULT_GENESIS_BLOCK,
        ge=0,
        description="First block scanned for wallet transfers when no checkpoint exists",
    )

    # Scanning
    claim_batch_size: int = Field(
        default=10_000, gt=0, description="Blocks per log request for claim scans"
    )
    wallet_batch_size: int = Field(
        default=100, gt=0, description="Blocks per batch for wallet scans"
    )
    rate_limit_cooldown: float = Field(
        default=5.0, ge=0, description="Seconds to wait after a rate-limit error"
    )
    max_rate_limit_retries: int = Field(
        default=10,
        ge=0,
        description="Consecutive rate-limit retries of one batch before aborting",
    )
    inter_batch_delay: float = Field(
        default=0.1, ge=0, description="Pause between batches in seconds"
    )
    scan_interval_seconds: int = Field(
        default=300, ge=5, description="Scheduled scan interval in seconds"
    )
    scheduler_enabled: bool = True

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = Field(default=3001, ge=1, le=65535)

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str = "logs"

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
        if self.database_url.startswith('sqlite') and self.environment == 'production':
            logger.warning(
                'DATABASE_URL points to SQLite in production. '
                'Use postgresql+asyncpg:// for concurrent API readers.'
            )
        return self

    @field_validator(
        'claim_contract_address',
        'token_address',
        'admin_wallet_address',
        'distribution_wallet_address',
    )
    @classmethod
    def validate_eth_address(cls, v: str) -> str:
        """Validate Ethereum address format."""
        if not v.startswith('0x') or len(v) != 42:
            raise ValueError(
                f'Invalid Ethereum address: {v}. '
                'Must start with 0x and be 42 characters long.'
            )
        try:
            int(v[2:], 16)
        except ValueError as exc:
            raise ValueError(f'Invalid Ethereum address format: {v}') from exc
        return v.lower()

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(('postgresql+asyncpg://', 'sqlite+aiosqlite://')):
            raise ValueError(
                'DATABASE_URL must start with postgresql+asyncpg:// '
                'or sqlite+aiosqlite://'
            )
        return v


# Global settings instance
settings = Settings()
