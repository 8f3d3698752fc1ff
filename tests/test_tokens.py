"""Unit tests for auth/tokens.py -- TokenIssuer / TokenVerifier.

Covers:
- Issued tokens are three-segment JWTs carrying {id, username, iat, exp}
- Verification is repeatable (tokens are not single-use)
- Expiry boundary: valid one second before exp, expired at exp
- Tamper resistance across the claims and signature segments
- Foreign secrets, alg "none" and disallowed algorithms fail as bad signatures
- Unparseable input fails as malformed

A fixed clock keeps every timestamp deterministic.
"""

import base64
import json

import pytest
from jose import jwt

from auth.errors import InvalidSignature, MalformedToken, TokenError, TokenExpired
from auth.models import TokenClaims
from auth.tokens import TokenIssuer, TokenVerifier

NOW = 1_700_000_000
TTL = 3600


def _clock(value: int):
    return lambda: value


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _flip(segment: str, index: int) -> str:
    replacement = "A" if segment[index] != "A" else "B"
    return segment[:index] + replacement + segment[index + 1 :]


@pytest.fixture
def issuer(secret) -> TokenIssuer:
    return TokenIssuer(secret, ttl_seconds=TTL, clock=_clock(NOW))


@pytest.fixture
def verifier(secret) -> TokenVerifier:
    return TokenVerifier(secret, clock=_clock(NOW))


# ---------------------------------------------------------------------------
# Issue / verify
# ---------------------------------------------------------------------------


def test_issue_produces_signed_claims(issuer):
    token = issuer.issue(1, "alice")
    assert token.count(".") == 2
    assert jwt.get_unverified_header(token)["alg"] == "HS256"
    assert jwt.get_unverified_claims(token) == {"id": 1, "username": "alice", "iat": NOW, "exp": NOW + TTL}


def test_verify_returns_claims(issuer, verifier):
    claims = verifier.verify(issuer.issue(7, "alice"))
    assert claims == TokenClaims(id=7, username="alice", issued_at=NOW, expires_at=NOW + TTL)


def test_verify_is_repeatable(issuer, verifier):
    token = issuer.issue(1, "alice")
    assert verifier.verify(token) == verifier.verify(token)


def test_issuer_requires_secret():
    with pytest.raises(ValueError):
        TokenIssuer("")
    with pytest.raises(ValueError):
        TokenVerifier("")


def test_issuer_rejects_non_positive_ttl(secret):
    with pytest.raises(ValueError):
        TokenIssuer(secret, ttl_seconds=0)


# ---------------------------------------------------------------------------
# Expiry
# ---------------------------------------------------------------------------


def test_valid_one_second_before_expiry(issuer, secret):
    token = issuer.issue(1, "alice")
    verifier = TokenVerifier(secret, clock=_clock(NOW + TTL - 1))
    assert verifier.verify(token).username == "alice"


def test_expired_at_expiry_instant(issuer, secret):
    token = issuer.issue(1, "alice")
    verifier = TokenVerifier(secret, clock=_clock(NOW + TTL))
    with pytest.raises(TokenExpired):
        verifier.verify(token)


def test_extended_expiry_breaks_signature(issuer, verifier):
    """Editing exp in the claims segment must not extend the token's life."""
    header, _, signature = issuer.issue(1, "alice").split(".")
    forged_claims = _b64({"id": 1, "username": "alice", "iat": NOW, "exp": NOW + 10 * TTL})
    with pytest.raises(InvalidSignature):
        verifier.verify(f"{header}.{forged_claims}.{signature}")


# ---------------------------------------------------------------------------
# Tampering and foreign signers
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("segment_index", [1, 2])
def test_any_changed_character_is_rejected(issuer, verifier, segment_index):
    segments = issuer.issue(1, "alice").split(".")
    target = segments[segment_index]
    for i in range(len(target)):
        tampered = list(segments)
        tampered[segment_index] = _flip(target, i)
        with pytest.raises(TokenError):
            verifier.verify(".".join(tampered))


def test_swapped_identity_rejected(issuer, verifier):
    header, _, signature = issuer.issue(1, "alice").split(".")
    forged_claims = _b64({"id": 2, "username": "bob", "iat": NOW, "exp": NOW + TTL})
    with pytest.raises(InvalidSignature):
        verifier.verify(f"{header}.{forged_claims}.{signature}")


def test_different_secret_rejected(verifier):
    foreign = TokenIssuer("another-secret-that-is-long-enough-0000", clock=_clock(NOW))
    with pytest.raises(InvalidSignature):
        verifier.verify(foreign.issue(1, "alice"))


def test_unsigned_token_rejected(verifier):
    header = _b64({"alg": "none", "typ": "JWT"})
    claims = _b64({"id": 1, "username": "alice", "iat": NOW, "exp": NOW + TTL})
    with pytest.raises(InvalidSignature):
        verifier.verify(f"{header}.{claims}.")


def test_other_algorithm_rejected(verifier, secret):
    token = jwt.encode(
        {"id": 1, "username": "alice", "iat": NOW, "exp": NOW + TTL},
        secret,
        algorithm="HS512",
    )
    with pytest.raises(InvalidSignature):
        verifier.verify(token)


def test_configured_algorithm_round_trip(secret):
    issuer = TokenIssuer(secret, algorithm="HS512", clock=_clock(NOW))
    verifier = TokenVerifier(secret, algorithm="HS512", clock=_clock(NOW))
    assert verifier.verify(issuer.issue(3, "carol")).id == 3


# ---------------------------------------------------------------------------
# Malformed input
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "token",
    [
        "",
        "not-a-token",
        "only.two",
        "a.b.c.d",
        "..",
        "!!!.???.***",
        "e30.e30.e30=",
    ],
)
def test_unparseable_tokens_are_malformed(verifier, token):
    with pytest.raises(MalformedToken):
        verifier.verify(token)


def test_non_json_claims_are_malformed(verifier):
    header = _b64({"alg": "HS256", "typ": "JWT"})
    claims = base64.urlsafe_b64encode(b"not json").rstrip(b"=").decode("ascii")
    with pytest.raises(MalformedToken):
        verifier.verify(f"{header}.{claims}.c2ln")


def test_missing_claims_are_malformed(verifier, secret):
    token = jwt.encode({"username": "alice", "iat": NOW, "exp": NOW + TTL}, secret, algorithm="HS256")
    with pytest.raises(MalformedToken):
        verifier.verify(token)


def test_mistyped_claims_are_malformed(verifier, secret):
    token = jwt.encode(
        {"id": True, "username": "alice", "iat": NOW, "exp": NOW + TTL},
        secret,
        algorithm="HS256",
    )
    with pytest.raises(MalformedToken):
        verifier.verify(token)
