"""Domain models for login sessions."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SessionClaims:
    """Decoded content of a valid session token."""

    account_id: str
    name: str
    issued_at: datetime
    expires_at: datetime
