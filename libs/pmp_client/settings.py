"""
Runtime settings for the PMP API client.

Uses Pydantic Settings for type-safe configuration with validation. Every
setting can be overridden via a PMP_-prefixed environment variable or a .env
file.

These settings describe HOW the client runs (timeouts, TLS, file locations).
The vault connection itself (AuthToken, Host, Prefix) lives in the
PMPAPIClient config file, which is re-read whenever it changes.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PMPClientSettings(BaseSettings):
    """PMP client runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PMP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Config file location
    config_dir_env_var: str = Field(
        default="APPSETTINGS_DIRECTORY",
        min_length=1,
        description="Environment variable naming the directory that holds the config file",
    )
    config_file_name: str = Field(
        default="PMPAPIClient_config.json",
        min_length=1,
        description="Config file name inside the config directory",
    )

    # Vault REST API
    api_prefix: str = Field(
        default="/restapi/json/v1",
        description="Fixed path prefix of the vault REST API",
    )
    application_resource_type: str = Field(
        default="Application",
        description="Resource type whose accounts are enumerated during discovery",
    )

    # HTTP transport
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout applied to every vault request",
    )
    verify_tls: bool = Field(
        default=True,
        description="Verify the vault's TLS certificate (disable only for local testing)",
    )

    # Logging
    redact_token_in_logs: bool = Field(
        default=False,
        description="Replace AUTHTOKEN values with a placeholder in logged URLs",
    )


@lru_cache
def get_settings() -> PMPClientSettings:
    """
    Get cached settings instance.

    Example:
        >>> get_settings().config_file_name
        'PMPAPIClient_config.json'
    """
    return PMPClientSettings()
