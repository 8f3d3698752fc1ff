"""
auth/models.py -- Domain dataclasses for credential and token entities.

Pattern: Data class (pure data container, near-zero logic). The store and
the service do the work; these only own the domain shape.

Both classes are frozen: an Account is immutable once inserted and claims
are a snapshot of what was signed.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Account:
    """A registered local account.

    id is assigned by the store (1, 2, 3, ...) and never reused.
    password_hash is the bcrypt output -- the plaintext is never kept.
    """

    id: int
    username: str
    password_hash: str
    created_at: str = ""


@dataclass(frozen=True)
class TokenClaims:
    """Identity and validity window carried inside a signed token.

    Timestamps are integer Unix seconds (JWT NumericDate). The wire names
    are the short JWT forms: iat / exp.
    """

    id: int
    username: str
    issued_at: int
    expires_at: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "iat": self.issued_at,
            "exp": self.expires_at,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TokenClaims:
        """Build claims from a decoded JWT payload.

        Raises KeyError / TypeError when a claim is missing or has the wrong
        type. bool is rejected explicitly because it is an int subclass.
        """
        values = {
            "id": payload["id"],
            "username": payload["username"],
            "issued_at": payload["iat"],
            "expires_at": payload["exp"],
        }
        for name in ("id", "issued_at", "expires_at"):
            if not isinstance(values[name], int) or isinstance(values[name], bool):
                raise TypeError(f"claim {name} must be an integer")
        if not isinstance(values["username"], str):
            raise TypeError("claim username must be a string")
        return cls(**values)
