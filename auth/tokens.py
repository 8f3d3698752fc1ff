"""
auth/tokens.py -- JWT issuance and verification.

Security design decisions:
  JWT: python-jose with an HMAC algorithm (HS256 by default). The claim set
       {id, username, iat, exp} is signed as a whole, so the expiry cannot be
       edited without breaking the signature.

  Verification runs three ordered steps and raises a distinct TokenError
  subclass for each:
    1. parse      -- three canonical base64url segments, JSON object header
                     and claims, required claims present  -> MalformedToken
    2. signature  -- HMAC over header.claims with our secret, only the
                     configured algorithm accepted         -> InvalidSignature
    3. expiry     -- now >= exp                            -> TokenExpired
  A token signed with another secret, or with alg "none", fails step 2 the
  same way a tampered token does.

  Canonical base64url: urlsafe_b64decode ignores stray characters and the
  unused low bits of the last character. Re-encoding each segment and
  comparing rejects those variants so a flipped bit anywhere in the token
  is always detected.

  Secret and TTL are constructor arguments; nothing here reads settings.
  The secret is never logged or included in error messages.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import time
from typing import Callable

from jose import JWTError, jws, jwt
from jose.exceptions import JWSError
from jose.utils import base64url_decode, base64url_encode

from auth.errors import InvalidSignature, MalformedToken, TokenExpired
from auth.models import TokenClaims

DEFAULT_ALGORITHM = "HS256"
DEFAULT_TTL_SECONDS = 3600

Clock = Callable[[], float]


def _check_segment(segment: str) -> None:
    try:
        raw = base64url_decode(segment.encode("ascii"))
    except ValueError as exc:
        raise MalformedToken("segment is not base64url") from exc
    if base64url_encode(raw).decode("ascii") != segment:
        raise MalformedToken("segment is not canonical base64url")


class TokenIssuer:
    """Mints signed, expiring bearer tokens.

    Usage:
        issuer = TokenIssuer(secret, ttl_seconds=3600)
        token = issuer.issue(account.id, account.username)
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        algorithm: str = DEFAULT_ALGORITHM,
        clock: Clock = time.time,
    ) -> None:
        if not secret:
            raise ValueError("TokenIssuer requires a non-empty secret")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self.algorithm = algorithm
        self._clock = clock

    def issue(self, account_id: int, username: str) -> str:
        now = int(self._clock())
        claims = TokenClaims(
            id=account_id,
            username=username,
            issued_at=now,
            expires_at=now + self.ttl_seconds,
        )
        return jwt.encode(claims.to_payload(), self._secret, algorithm=self.algorithm)


class TokenVerifier:
    """Validates tokens minted by a TokenIssuer sharing the same secret.

    verify() is read-only and keeps no state, so one instance serves any
    number of concurrent requests. Verifying the same token twice returns
    equal claims -- tokens are not single-use.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = DEFAULT_ALGORITHM,
        clock: Clock = time.time,
    ) -> None:
        if not secret:
            raise ValueError("TokenVerifier requires a non-empty secret")
        self._secret = secret
        self.algorithm = algorithm
        self._clock = clock

    def verify(self, token: str) -> TokenClaims:
        """Return the embedded claims or raise a TokenError subclass."""
        claims = self._parse(token)

        try:
            jws.verify(token, self._secret, algorithms=[self.algorithm])
        except JWSError as exc:
            raise InvalidSignature("signature verification failed") from exc

        if int(self._clock()) >= claims.expires_at:
            raise TokenExpired("token expired")
        return claims

    @staticmethod
    def _parse(token: str) -> TokenClaims:
        if not isinstance(token, str) or not token:
            raise MalformedToken("empty token")
        segments = token.split(".")
        if len(segments) != 3 or not segments[0] or not segments[1]:
            raise MalformedToken("token must have three segments")
        for segment in segments:
            _check_segment(segment)

        try:
            header = jwt.get_unverified_header(token)
            payload = jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise MalformedToken("undecodable header or claims") from exc
        if not isinstance(header, dict) or "alg" not in header:
            raise MalformedToken("header has no alg")

        try:
            return TokenClaims.from_payload(payload)
        except (KeyError, TypeError) as exc:
            raise MalformedToken("missing or mistyped claims") from exc
