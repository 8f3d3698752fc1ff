"""
auth/passwords.py -- bcrypt password hashing.

Security design decisions:
  bcrypt directly (no passlib wrapper). passlib's wrap-bug detection creates
  a password longer than 72 bytes, which bcrypt 4.x rejects with an explicit
  error. Direct bcrypt usage is simpler and actively maintained.

  Cost factor: the rounds argument (log2 of the work factor) is configurable
  so tests can use the minimum (4) while production uses BCRYPT_ROUNDS.

  72-byte limit: bcrypt only reads the first 72 bytes of its input. Older
  releases truncated silently, bcrypt 5.x raises ValueError instead. We
  truncate the UTF-8 encoding ourselves in both hash() and verify() so the
  behaviour is the same on every release.

  Timing: bcrypt.checkpw compares the final digest in constant time.
  verify_dummy() runs a full verify against a precomputed hash so the
  "unknown username" path costs the same as a wrong password [C1].

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import bcrypt

_BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Salted one-way hashing with a tunable bcrypt cost.

    Usage:
        hasher = PasswordHasher(rounds=12)
        stored = hasher.hash("s3cret!")
        hasher.verify("s3cret!", stored)   # True
    """

    def __init__(self, rounds: int = 10) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self.rounds = rounds
        # Computed once so the first unknown-user login is not measurably
        # slower than later ones.
        self._dummy_hash = bcrypt.hashpw(_encode("credgate_timing_dummy"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")

    def hash(self, plain: str) -> str:
        """Return a bcrypt hash ($2b$<rounds>$<salt><digest>) of plain.

        Raises ValueError on an empty password. Any bcrypt failure propagates
        to the caller, which reports it as an internal error.
        """
        if not plain:
            raise ValueError("password must be non-empty")
        return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if plain matches hashed. Never raises."""
        if not plain or not hashed:
            return False
        try:
            return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            # Malformed or foreign hash string.
            return False

    def verify_dummy(self, plain: str) -> bool:
        """Burn one verify's worth of CPU and return False."""
        self.verify(plain or "x", self._dummy_hash)
        return False
