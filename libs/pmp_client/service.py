"""
PMP API client service.

Retrieves account passwords from a Password Manager Pro vault on demand,
keeping three pieces of cached state per client instance:

    - the vault configuration, re-read whenever the config file's mtime moves
    - the account directory, rediscovered after every configuration reload
    - fetched passwords, refetched once after every configuration reload

Retrieval flow:
    retrieve_password(key)
      -> ensure_fresh_configuration()   (stat config file, reload if newer)
           -> rebuild_directory()       (only after a successful reload)
      -> directory lookup of Prefix + key
      -> cached password, or GET .../password on a miss or stale entry

Failure handling:
    Every failure degrades to "" for the caller. Configuration errors and
    failed or malformed vault answers mark the client NEEDS_RELOAD so the
    next retrieval redrives the whole reload sequence. A key missing from the directory does
    NOT trigger a reload: rediscovery on every miss would hammer the vault API
    with requests for a misconfigured key. Once the key is fixed in the vault,
    an operator touches the config file (or calls request_reload()).

Thread Safety:
    Reload transitions are serialized by a re-entrant lock. The directory and
    password cache are internally locked. Network calls block the calling
    thread; there is no background refresh.
"""

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

import httpx

from libs.pmp_client.api import PMPEndpointCaller
from libs.pmp_client.cache import PasswordCache
from libs.pmp_client.config import ConfigWatcher, PMPConfiguration
from libs.pmp_client.directory import AccountDirectory, AccountInfo
from libs.pmp_client.exceptions import ConfigurationError, ResponseParseError
from libs.pmp_client.manager import PasswordProvider
from libs.pmp_client.models import (
    AccountListResponse,
    PasswordResponse,
    ResourceListResponse,
    ResponseT,
    parse_response,
)
from libs.pmp_client.settings import PMPClientSettings

logger = logging.getLogger(__name__)


class ReloadStatus(str, Enum):
    """Configuration reload state of a client."""

    FRESH = "fresh"
    NEEDS_RELOAD = "needs_reload"
    RELOAD_IN_PROGRESS = "reload_in_progress"


def _utc_now() -> datetime:
    return datetime.now(UTC)


class PMPAPIClientService(PasswordProvider):
    """
    Password retrieval client for the PMP REST API.

    Example:
        >>> with PMPAPIClientService() as client:
        ...     password = client.retrieve_password("reporting_db")
    """

    def __init__(
        self,
        settings: PMPClientSettings | None = None,
        http_client: httpx.Client | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Args:
            settings: Runtime settings. Default: loaded from PMP_* environment.
            http_client: HTTP client to use. When omitted the service creates
                (and later closes) its own, honoring the timeout and TLS
                verification settings.
            clock: Returns the current aware datetime. Injectable for tests.
        """
        self._settings = settings or PMPClientSettings()
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.Client(
            timeout=self._settings.request_timeout_seconds,
            verify=self._settings.verify_tls,
        )
        self._clock = clock or _utc_now

        self._watcher = ConfigWatcher(self._settings)
        self._caller = PMPEndpointCaller(
            self._http_client,
            api_prefix=self._settings.api_prefix,
            on_failure=self._mark_needs_reload,
            redact_token=self._settings.redact_token_in_logs,
        )
        self._directory = AccountDirectory()
        self._passwords = PasswordCache()

        self._reload_lock = threading.RLock()
        self._configuration: PMPConfiguration | None = None
        self._last_reload_at: datetime | None = None
        self._status = ReloadStatus.NEEDS_RELOAD

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def reload_status(self) -> ReloadStatus:
        return self._status

    @property
    def configuration(self) -> PMPConfiguration | None:
        return self._configuration

    @property
    def last_reload_at(self) -> datetime | None:
        return self._last_reload_at

    def account_names(self) -> list[str]:
        return self._directory.names()

    def request_reload(self) -> None:
        """Force a full reload on the next retrieval, as if the config file was touched."""
        logger.info("Configuration reload requested")
        self._mark_needs_reload()

    # ------------------------------------------------------------------
    # Public operation
    # ------------------------------------------------------------------

    def retrieve_password(self, key: str) -> str:
        """
        Return the password for ``key`` or "" on any failure.

        The vault account looked up is ``Prefix + key``, with Prefix taken
        from the config file.
        """
        logger.info("RetrievePassword called. Key: %s", key, extra={"key": key})
        try:
            return self._retrieve_password(key)
        except Exception:
            logger.exception("RetrievePassword failed unexpectedly", extra={"key": key})
            self._mark_needs_reload()
            return ""

    def _retrieve_password(self, key: str) -> str:
        if not self.ensure_fresh_configuration():
            return ""

        configuration = self._configuration
        if configuration is None:
            return ""
        account_name = f"{configuration.prefix}{key}"

        info = self._directory.get(account_name)
        if info is None:
            logger.error(
                "RetrievePassword could not find key: %s",
                key,
                extra={"key": key, "account_name": account_name},
            )
            return ""

        cached = self._passwords.get(account_name)
        if cached is not None and not cached.is_stale(self._last_reload_at):
            logger.info(
                "RetrievePassword using cached value",
                extra={"key": key, "account_name": account_name},
            )
            return cached.value

        logger.info(
            "RetrievePassword calling API",
            extra={
                "key": key,
                "account_name": account_name,
                "reason": "stale" if cached is not None else "miss",
            },
        )
        return self._fetch_password(configuration, account_name, info)

    def _fetch_password(
        self, configuration: PMPConfiguration, account_name: str, info: AccountInfo
    ) -> str:
        path = f"/resources/{info.group_id}/accounts/{info.account_id}/password"
        response = self._fetch(PasswordResponse, configuration, path)
        password = response.password if response is not None else None
        if password is None:
            logger.error(
                "Password not present in vault response",
                extra={"account_name": account_name, "endpoint": path},
            )
            return ""

        self._passwords.set(account_name, password, fetched_at=self._clock())
        return password

    # ------------------------------------------------------------------
    # Configuration watcher
    # ------------------------------------------------------------------

    def ensure_fresh_configuration(self) -> bool:
        """
        Reload the configuration if the config file changed or a reload is pending.

        Returns:
            True if a usable configuration and directory are in place. False
            if the config file is unavailable or invalid, or if the reload's
            account discovery found nothing.
        """
        with self._reload_lock:
            try:
                config_path = self._watcher.locate()
                if self._is_reload_due(config_path):
                    return self._reload(config_path)
            except ConfigurationError as e:
                self._reset_and_log_error(str(e))
                return False
            except (OSError, ValueError) as e:
                self._reset_and_log_error(f"Failed to parse {self._watcher.file_name}: {e}")
                return False

            return True

    def _is_reload_due(self, config_path: Path) -> bool:
        if self._status is not ReloadStatus.FRESH or self._last_reload_at is None:
            return True
        return self._watcher.modified_at(config_path) > self._last_reload_at

    def _reload(self, config_path: Path) -> bool:
        self._status = ReloadStatus.RELOAD_IN_PROGRESS
        try:
            configuration = self._watcher.load(config_path)
        except ConfigurationError as e:
            self._reset_and_log_error(f"Failed to parse {self._watcher.file_name}")
            for error in e.errors:
                logger.error(error, extra={"config_path": str(config_path)})
            return False

        self._configuration = configuration
        self._last_reload_at = self._clock()
        logger.info(
            "Configuration loaded",
            extra={"host": configuration.host, "prefix": configuration.prefix},
        )

        discovered = self.rebuild_directory()

        # A failed vault call during discovery has already asked for a reload.
        if self._status is ReloadStatus.RELOAD_IN_PROGRESS:
            self._status = ReloadStatus.FRESH
        return discovered

    # ------------------------------------------------------------------
    # Directory
    # ------------------------------------------------------------------

    def rebuild_directory(self) -> bool:
        """
        Rediscover every account in the vault's Application resources.

        The previous directory is discarded. Failing endpoint calls contribute
        zero accounts and enumeration moves on to the next resource.

        Returns:
            True if at least one account was discovered.
        """
        configuration = self._configuration
        if configuration is None:
            return False

        discovered: dict[str, AccountInfo] = {}
        application_count = 0

        resources = self._fetch(ResourceListResponse, configuration, "/resources")
        for resource in resources.resources if resources is not None else []:
            if resource.resource_type != self._settings.application_resource_type:
                continue
            if resource.resource_id is None:
                continue
            application_count += 1

            path = f"/resources/{resource.resource_id}/accounts"
            accounts = self._fetch(AccountListResponse, configuration, path)
            if accounts is None:
                continue
            for account in accounts.accounts:
                if account.account_id is None or account.account_name is None:
                    continue
                discovered[account.account_name] = AccountInfo(
                    group_id=resource.resource_id,
                    account_id=account.account_id,
                )

        self._directory.replace(discovered)

        if not discovered:
            logger.error(
                "No accounts discovered",
                extra={"application_resources": application_count},
            )
            return False

        logger.info(
            "Account directory rebuilt",
            extra={
                "application_resources": application_count,
                "account_count": len(discovered),
            },
        )
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fetch(
        self, model: type[ResponseT], configuration: PMPConfiguration, path: str
    ) -> ResponseT | None:
        payload = self._caller.call_endpoint(configuration, path)
        if not payload:
            # Failed calls are already logged by the endpoint caller.
            return None

        try:
            response = parse_response(model, payload, path)
        except ResponseParseError as e:
            logged_url = self._caller.loggable_url(configuration, path)
            logger.error(
                "Endpoint call failed: %s: %s",
                logged_url,
                e,
                extra={"endpoint": path, "url": logged_url, "errors": e.errors},
            )
            self._mark_needs_reload()
            return None

        result = response.operation.result
        if result is not None and not result.is_success:
            logger.warning(
                "Vault reported %s for %s: %s",
                result.status,
                path,
                result.message,
                extra={"endpoint": path, "status": result.status},
            )
        return response

    def _mark_needs_reload(self) -> None:
        with self._reload_lock:
            self._status = ReloadStatus.NEEDS_RELOAD

    def _reset_and_log_error(self, message: str) -> None:
        logger.error(message)
        self._mark_needs_reload()

    def close(self) -> None:
        if self._owns_http_client:
            self._http_client.close()
