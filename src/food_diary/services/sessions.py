"""Signed, time-bounded session tokens."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import jwt

from food_diary.domain.models import Account
from food_diary.domain.sessions import SessionClaims

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "food_diary_session"
DEFAULT_MAX_AGE = timedelta(hours=24)

_ALGORITHM = "HS256"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionIssuer:
    """Issues, validates and renews HS256-signed session tokens."""

    secret: str
    max_age: timedelta = DEFAULT_MAX_AGE
    clock: Callable[[], datetime] = field(default=_utc_now)

    def issue(self, account: Account) -> str:
        """Issue a token for a freshly verified account."""
        return self._encode(account.id, account.username)

    def renew(self, claims: SessionClaims) -> str:
        """Issue a fresh token carrying the same identity as ``claims``."""
        return self._encode(claims.account_id, claims.name)

    def validate(self, token: str | None) -> SessionClaims | None:
        """Return the token's claims, or ``None`` if it is forged, malformed or expired."""
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[_ALGORITHM],
                options={
                    "require": ["sub", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
        except (jwt.InvalidTokenError, TypeError, ValueError) as exc:
            logger.info("Rejected session token: %s", exc)
            return None
        if self.clock() >= expires_at:
            return None
        return SessionClaims(
            account_id=str(payload["sub"]),
            name=str(payload.get("name") or ""),
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def _encode(self, account_id: str, name: str) -> str:
        now = self.clock()
        payload = {
            "sub": account_id,
            "name": name,
            "iat": int(now.timestamp()),
            "exp": int((now + self.max_age).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=_ALGORITHM)
