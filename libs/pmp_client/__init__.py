"""
Password Manager Pro (PMP) API client.

Fetches account passwords on demand from a PMP vault's REST API, caching
discovered accounts and fetched passwords until the client's config file
changes.

Quick Start:
    >>> from libs.pmp_client import get_pmp_client
    >>> client = get_pmp_client()
    >>> db_password = client.retrieve_password("reporting_db")  # "" on failure

Configuration:
    - APPSETTINGS_DIRECTORY env var names the directory holding
      PMPAPIClient_config.json ({"AuthToken", "Host", "Prefix"})
    - Touch the config file to force account rediscovery and password refetch
    - PMP_* env vars tune timeouts, TLS verification and log redaction

Security:
    - Password values are never logged
    - Failing vault URLs are logged WITH the auth token unless
      PMP_REDACT_TOKEN_IN_LOGS is enabled; treat logs as sensitive
"""

from libs.pmp_client.cache import CachedPassword, PasswordCache
from libs.pmp_client.config import ConfigWatcher, PMPConfiguration
from libs.pmp_client.directory import AccountDirectory, AccountInfo
from libs.pmp_client.exceptions import (
    ConfigurationError,
    EndpointCallError,
    PMPClientError,
    ResponseParseError,
)
from libs.pmp_client.factory import create_pmp_client, get_pmp_client, reset_pmp_client
from libs.pmp_client.manager import PasswordProvider
from libs.pmp_client.service import PMPAPIClientService, ReloadStatus
from libs.pmp_client.settings import PMPClientSettings, get_settings

__all__ = [
    # Core interface
    "PasswordProvider",
    "PMPAPIClientService",
    "ReloadStatus",
    # Factory (recommended for most use cases)
    "create_pmp_client",
    "get_pmp_client",
    "reset_pmp_client",
    # Configuration
    "PMPClientSettings",
    "get_settings",
    "PMPConfiguration",
    "ConfigWatcher",
    # State containers
    "AccountDirectory",
    "AccountInfo",
    "PasswordCache",
    "CachedPassword",
    # Exceptions
    "PMPClientError",
    "ConfigurationError",
    "EndpointCallError",
    "ResponseParseError",
]
