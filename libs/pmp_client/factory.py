"""
Factory for PMP API client instances.

Example Usage:
    >>> from libs.pmp_client.factory import get_pmp_client
    >>> client = get_pmp_client()  # process-wide instance
    >>> password = client.retrieve_password("reporting_db")

    >>> # Independent instance (tests, multiple vaults in one process)
    >>> client = create_pmp_client(settings=PMPClientSettings(verify_tls=False))

Environment Variables:
    APPSETTINGS_DIRECTORY (str, required at retrieval time):
        Directory containing PMPAPIClient_config.json
    PMP_* (optional):
        Runtime settings, see libs/pmp_client/settings.py
"""

import logging
import threading

import httpx

from libs.pmp_client.service import PMPAPIClientService
from libs.pmp_client.settings import PMPClientSettings, get_settings

logger = logging.getLogger(__name__)

_shared_client: PMPAPIClientService | None = None
_shared_client_lock = threading.Lock()


def create_pmp_client(
    settings: PMPClientSettings | None = None,
    http_client: httpx.Client | None = None,
) -> PMPAPIClientService:
    """
    Create a new, independent PMPAPIClientService.

    Args:
        settings: Runtime settings override. If None, uses get_settings().
        http_client: Optional pre-configured httpx.Client (e.g., with a custom
            CA bundle). The caller stays responsible for closing it.
    """
    resolved = settings if settings is not None else get_settings()
    if not resolved.verify_tls:
        logger.warning(
            "TLS verification disabled for PMP client. Use only for local testing.",
        )
    logger.info(
        "Initializing PMP client",
        extra={
            "config_dir_env_var": resolved.config_dir_env_var,
            "config_file_name": resolved.config_file_name,
            "request_timeout_seconds": resolved.request_timeout_seconds,
        },
    )
    return PMPAPIClientService(settings=resolved, http_client=http_client)


def get_pmp_client() -> PMPAPIClientService:
    """Return the process-wide client, creating it on first use."""
    global _shared_client
    with _shared_client_lock:
        if _shared_client is None:
            _shared_client = create_pmp_client()
        return _shared_client


def reset_pmp_client() -> None:
    """Close and discard the process-wide client (service shutdown, tests)."""
    global _shared_client
    with _shared_client_lock:
        if _shared_client is not None:
            _shared_client.close()
        _shared_client = None
