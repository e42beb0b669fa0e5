"""Tests for session token issuing and validation."""

from datetime import UTC, datetime, timedelta

import jwt

from food_diary.domain.models import Account
from food_diary.services.sessions import SessionIssuer
from tests.conftest import TEST_SECRET

ACCOUNT = Account(id="1", username="alice", password_hash="unused")
ISSUED_AT = datetime(2024, 1, 15, 8, 0, tzinfo=UTC)


class _Clock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def test_token_valid_until_max_age() -> None:
    clock = _Clock(ISSUED_AT)
    issuer = SessionIssuer(secret=TEST_SECRET, clock=clock)
    token = issuer.issue(ACCOUNT)

    clock.now = ISSUED_AT + timedelta(hours=23, minutes=59, seconds=59)
    claims = issuer.validate(token)
    assert claims is not None
    assert claims.account_id == "1"
    assert claims.name == "alice"
    assert claims.expires_at == ISSUED_AT + timedelta(hours=24)

    clock.now = ISSUED_AT + timedelta(hours=24)
    assert issuer.validate(token) is None

    clock.now = ISSUED_AT + timedelta(days=2)
    assert issuer.validate(token) is None


def test_renew_extends_expiry() -> None:
    clock = _Clock(ISSUED_AT)
    issuer = SessionIssuer(secret=TEST_SECRET, clock=clock)
    claims = issuer.validate(issuer.issue(ACCOUNT))
    assert claims is not None

    clock.now = ISSUED_AT + timedelta(hours=20)
    renewed = issuer.validate(issuer.renew(claims))

    assert renewed is not None
    assert renewed.expires_at == ISSUED_AT + timedelta(hours=44)


def test_token_signed_with_other_secret_is_rejected() -> None:
    forged = SessionIssuer(secret="another-secret-that-is-long-enough-too").issue(ACCOUNT)

    assert SessionIssuer(secret=TEST_SECRET).validate(forged) is None


def test_garbage_and_missing_tokens_are_rejected() -> None:
    issuer = SessionIssuer(secret=TEST_SECRET)

    assert issuer.validate(None) is None
    assert issuer.validate("") is None
    assert issuer.validate("not-a-token") is None


def test_token_without_expiry_is_rejected() -> None:
    token = jwt.encode({"sub": "1", "iat": 0}, TEST_SECRET, algorithm="HS256")

    assert SessionIssuer(secret=TEST_SECRET).validate(token) is None
