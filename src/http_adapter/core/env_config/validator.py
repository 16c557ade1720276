"""
Pydantic settings model for environment configuration.
"""

from typing import Optional, Literal
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AdapterSettings(BaseSettings):
    """
    Adapter configuration from environment variables.

    Reads from:
    1. Environment variables (HTTP_ADAPTER_*)
    2. .env file
    3. Defaults

    Example .env file:
        HTTP_ADAPTER_CONNECT_TIMEOUT=10
        HTTP_ADAPTER_KEEP_ALIVE_TIMEOUT=20
        HTTP_ADAPTER_SSL_TIMEOUT=25
        HTTP_ADAPTER_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix='HTTP_ADAPTER_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Client defaults
    connect_timeout: float = Field(default=60, gt=0)
    send_timeout: float = Field(default=120, gt=0)
    receive_timeout: float = Field(default=60, gt=0)

    keep_alive_timeout: float = Field(default=15, gt=0)
    ssl_timeout: Optional[float] = Field(default=None, gt=0)
    transparent_gzip_decompression: bool = Field(default=True)

    # Connection pool
    pool_connections: int = Field(default=10, ge=1)
    pool_maxsize: int = Field(default=10, ge=1)

    # Logging (disabled unless HTTP_ADAPTER_LOG_ENABLED=true)
    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = None

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_format', mode='before')
    @classmethod
    def normalize_format(cls, v):
        return v.lower() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_file_path(self) -> "AdapterSettings":
        """log_file_path is required when log_enable_file=True."""
        if self.log_enable_file and not self.log_file_path:
            raise ValueError("log_file_path is required when log_enable_file=True")
        return self
