"""
auth/store.py -- Account persistence port and its in-memory implementation.

Pattern: Repository. AuthService talks to the AccountStore protocol only, so a
durable backend can replace InMemoryAccountStore without touching the service.

Concurrency:
  insert() performs check-then-insert inside one critical section guarded by
  a threading.Lock. Two concurrent inserts of the same username produce one
  Account and one DuplicateUsername -- never two accounts, never an overwrite.
  The lock covers only the dict operations; callers hash passwords before
  calling insert() so bcrypt never runs under the lock.

  Reads (exists, find_by_username) take the same lock. Dict reads are cheap,
  and holding it keeps id assignment and visibility trivially consistent.

Lifetime: process memory. Accounts vanish on restart.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import itertools
import threading
from datetime import datetime, timezone
from typing import Protocol

from auth.errors import DuplicateUsername
from auth.models import Account


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class AccountStore(Protocol):
    """Capability interface for account persistence. No update or delete."""

    def exists(self, username: str) -> bool: ...

    def insert(self, username: str, password_hash: str) -> Account: ...

    def find_by_username(self, username: str) -> Account | None: ...

    def count(self) -> int: ...


class InMemoryAccountStore:
    """Dict-backed AccountStore keyed by exact (case-sensitive) username.

    Usage:
        store = InMemoryAccountStore()
        account = store.insert("alice", hasher.hash("s3cret!"))
        store.find_by_username("alice")   # -> Account(id=1, ...)
    """

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def exists(self, username: str) -> bool:
        with self._lock:
            return username in self._accounts

    def insert(self, username: str, password_hash: str) -> Account:
        """Create and return a new Account.

        Raises DuplicateUsername if username is already present. The id
        counter only advances on success, so ids stay gap-free.
        """
        with self._lock:
            if username in self._accounts:
                raise DuplicateUsername(username)
            account = Account(
                id=next(self._ids),
                username=username,
                password_hash=password_hash,
                created_at=_now_iso(),
            )
            self._accounts[username] = account
            return account

    def find_by_username(self, username: str) -> Account | None:
        with self._lock:
            return self._accounts.get(username)

    def count(self) -> int:
        with self._lock:
            return len(self._accounts)
