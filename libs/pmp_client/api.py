"""
Vault REST endpoint caller.

Issues authenticated GET requests against the PMP REST API and returns the
decoded JSON object. Failures never propagate: they are logged, reported to
the owning client through ``on_failure`` (which forces a full reconfiguration
on the next retrieval) and surface as an empty dict.

URL format:
    https://{Host}{api_prefix}{path}?AUTHTOKEN={AuthToken}

Security:
    The auth token travels in the query string, so failing URLs are logged
    with the token unless ``redact_token`` is enabled. Treat these logs as
    sensitive.
"""

import json
import logging
from collections.abc import Callable
from typing import Any

import httpx

from libs.common.log_sanitizer import redact_auth_token
from libs.pmp_client.config import PMPConfiguration
from libs.pmp_client.exceptions import EndpointCallError

logger = logging.getLogger(__name__)


class PMPEndpointCaller:
    """
    Thin wrapper around an httpx.Client for the vault's REST endpoints.

    The configuration is passed per call because it can be replaced by a
    reload at any time; the caller holds no connection state of its own
    besides the shared HTTP client.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        api_prefix: str = "/restapi/json/v1",
        on_failure: Callable[[], None] | None = None,
        redact_token: bool = False,
    ) -> None:
        self._http_client = http_client
        self._api_prefix = api_prefix
        self._on_failure = on_failure
        self._redact_token = redact_token

    def build_url(self, configuration: PMPConfiguration, path: str) -> str:
        return (
            f"https://{configuration.host}{self._api_prefix}{path}"
            f"?AUTHTOKEN={configuration.auth_token}"
        )

    def loggable_url(self, configuration: PMPConfiguration, path: str) -> str:
        """URL as it should appear in logs (token masked if redaction is on)."""
        url = self.build_url(configuration, path)
        return redact_auth_token(url) if self._redact_token else url

    def call_endpoint(self, configuration: PMPConfiguration, path: str) -> dict[str, Any]:
        """
        GET ``path`` and return the decoded JSON object, or {} on any failure.

        Args:
            configuration: Current vault configuration (host + token)
            path: Endpoint path below the API prefix (e.g., "/resources")
        """
        url = self.build_url(configuration, path)
        try:
            return self._get_json(url, path)
        except EndpointCallError as e:
            logged_url = self.loggable_url(configuration, path)
            logger.error(
                "Endpoint call failed: %s: %s",
                logged_url,
                e.reason,
                extra={"endpoint": path, "url": logged_url, "error": e.reason},
            )
            if self._on_failure is not None:
                self._on_failure()
            return {}

    def _get_json(self, url: str, path: str) -> dict[str, Any]:
        try:
            response = self._http_client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EndpointCallError(
                endpoint=path, reason=f"HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise EndpointCallError(
                endpoint=path, reason=f"{type(e).__name__}: {e}"
            ) from e

        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise EndpointCallError(endpoint=path, reason=f"Invalid JSON response: {e}") from e

        if not isinstance(body, dict):
            raise EndpointCallError(
                endpoint=path, reason=f"Expected a JSON object, got {type(body).__name__}"
            )
        if not body:
            raise EndpointCallError(endpoint=path, reason="Empty JSON object in response")
        return body
