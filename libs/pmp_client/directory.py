"""
Thread-safe account directory.

Maps vault account names to the (group id, account id) pair needed to fetch
the account's password. The directory is rebuilt from scratch after every
configuration reload: entries are never edited individually, and a rebuild
replaces the whole mapping in one step so concurrent readers never observe a
half-built directory.

Example:
    >>> directory = AccountDirectory()
    >>> directory.replace({"svc_db": AccountInfo(group_id="301", account_id="902")})
    >>> directory.get("svc_db")
    AccountInfo(group_id='301', account_id='902')
"""

import threading
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class AccountInfo:
    """Location of an account inside the vault."""

    group_id: str
    account_id: str


class AccountDirectory:
    """
    Thread-safe mapping from account name to AccountInfo.

    All public methods can be called from multiple threads concurrently without
    external synchronization.
    """

    def __init__(self) -> None:
        self._accounts: dict[str, AccountInfo] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> AccountInfo | None:
        with self._lock:
            return self._accounts.get(name)

    def replace(self, accounts: Mapping[str, AccountInfo]) -> None:
        """Swap in a freshly discovered mapping, discarding every old entry."""
        new_accounts = dict(accounts)
        with self._lock:
            self._accounts = new_accounts

    def names(self) -> list[str]:
        """Sorted account names (for diagnostics; never includes passwords)."""
        with self._lock:
            return sorted(self._accounts)

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
