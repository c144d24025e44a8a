"""
Thread-safe in-memory password cache with reload-based invalidation.

Unlike a TTL cache, entries here never expire on their own. An entry becomes
stale when the client's configuration was reloaded after the password was
fetched: a reload may follow a rotation on the vault side, so every password
is fetched again once after each reload.

Security Properties:
    - In-memory only (passwords never written to disk)
    - Values never logged (only account names)

Example Usage:
    >>> from datetime import UTC, datetime
    >>> cache = PasswordCache()
    >>> cache.set("svc_db", "s3cret", fetched_at=datetime(2026, 1, 1, tzinfo=UTC))
    >>> entry = cache.get("svc_db")
    >>> entry.is_stale(reloaded_at=datetime(2026, 1, 2, tzinfo=UTC))
    True
"""

import threading
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CachedPassword:
    """A fetched password and the time it was fetched."""

    value: str
    fetched_at: datetime

    def is_stale(self, reloaded_at: datetime | None) -> bool:
        """
        True if the configuration was reloaded after this password was fetched.

        Args:
            reloaded_at: Time of the last successful configuration reload.
                None means no reload has happened, so nothing is stale.
        """
        if reloaded_at is None:
            return False
        return self.fetched_at < reloaded_at

    def __repr__(self) -> str:
        return f"CachedPassword(value='***', fetched_at={self.fetched_at!r})"


class PasswordCache:
    """
    Thread-safe mapping from account name to CachedPassword.

    Attributes:
        _entries: Internal storage mapping account names to cached passwords
        _lock: Threading lock for concurrent access protection
    """

    def __init__(self) -> None:
        self._entries: dict[str, CachedPassword] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> CachedPassword | None:
        with self._lock:
            return self._entries.get(name)

    def set(self, name: str, value: str, fetched_at: datetime) -> CachedPassword:
        """Insert or overwrite the entry for ``name``."""
        entry = CachedPassword(value=value, fetched_at=fetched_at)
        with self._lock:
            self._entries[name] = entry
        return entry

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
