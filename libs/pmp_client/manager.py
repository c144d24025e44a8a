"""
Abstract PasswordProvider interface.

Service code depends on this interface rather than on PMPAPIClientService so
that tests (and alternative credential sources) can be substituted without
touching callers.

Usage Example:
    >>> from libs.pmp_client.factory import get_pmp_client
    >>> provider: PasswordProvider = get_pmp_client()
    >>> db_password = provider.retrieve_password("reporting_db")
    >>> if not db_password:
    ...     raise RuntimeError("reporting_db credential unavailable")
"""

from abc import ABC, abstractmethod
from types import TracebackType


class PasswordProvider(ABC):
    """
    Abstract base class for password sources.

    Contract:
        - retrieve_password() NEVER raises; "" means the password could not be
          obtained for any reason. Callers decide how to handle a missing
          credential (fail the parent operation, fall back, ...).
        - Implementations MUST be thread-safe.
        - Password values MUST NOT be logged.
    """

    @abstractmethod
    def retrieve_password(self, key: str) -> str:
        """
        Return the password stored under ``key``, or "" on failure.

        Args:
            key: Logical key. Implementations may namespace it (the PMP client
                prepends its configured Prefix).
        """

    def close(self) -> None:  # noqa: B027 - Intentionally optional hook with default no-op
        """Release connections held by the provider (optional hook)."""

    def __enter__(self) -> "PasswordProvider":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
