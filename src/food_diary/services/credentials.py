"""Password hashing and credential verification for the configured account."""

import base64
import binascii
import hashlib
import hmac
import logging
import os
from dataclasses import dataclass

import bcrypt

from food_diary.domain.models import Account

logger = logging.getLogger(__name__)

ACCOUNT_ID = "1"

_PBKDF2_ALG = "sha256"
_PBKDF2_ITERATIONS = 200_000
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str, iterations: int = _PBKDF2_ITERATIONS) -> str:
    """Return a salted PBKDF2 hash in ``pbkdf2_<alg>$<iter>$<salt>$<digest>`` form."""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac(_PBKDF2_ALG, password.encode("utf-8"), salt, iterations)
    return f"pbkdf2_{_PBKDF2_ALG}${iterations}${_b64url_encode(salt)}${_b64url_encode(dk)}"


def encode_password_hash(password_hash: str) -> str:
    """Base64-encode a password hash for the APP_PASSWORD_HASH setting."""
    return base64.b64encode(password_hash.encode("utf-8")).decode("ascii")


def decode_password_hash(encoded: str) -> str:
    """Decode a base64 APP_PASSWORD_HASH value into the stored hash."""
    return base64.b64decode(encoded.encode("ascii"), validate=True).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored PBKDF2 or bcrypt hash.

    Raises ``ValueError`` when the stored hash is malformed.
    """
    if password_hash.startswith(_BCRYPT_PREFIXES):
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
    scheme, iter_s, salt_b64, dk_b64 = password_hash.split("$", 3)
    if not scheme.startswith("pbkdf2_"):
        raise ValueError(f"Unsupported password hash scheme: {scheme}")
    alg = scheme.split("_", 1)[1]
    iterations = int(iter_s)
    salt = _b64url_decode(salt_b64)
    expected = _b64url_decode(dk_b64)
    actual = hashlib.pbkdf2_hmac(alg, password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(actual, expected)


def build_account(username: str | None, encoded_hash: str | None) -> Account | None:
    """Build the configured account, or ``None`` when configuration is missing."""
    if not username or not encoded_hash:
        logger.warning("Login account is not configured")
        return None
    try:
        password_hash = decode_password_hash(encoded_hash)
    except (binascii.Error, UnicodeDecodeError, ValueError):
        logger.error("APP_PASSWORD_HASH is not valid base64")
        return None
    if not password_hash:
        return None
    return Account(id=ACCOUNT_ID, username=username, password_hash=password_hash)


@dataclass
class CredentialVerifier:
    """Validates submitted credentials against the configured account."""

    account: Account | None

    def verify(self, username: str | None, password: str | None) -> Account | None:
        """Return the account when both username and password match."""
        if self.account is None:
            return None
        if not username or not password:
            return None
        username_matches = hmac.compare_digest(
            username.encode("utf-8"), self.account.username.encode("utf-8")
        )
        # The hash is checked even for a wrong username so both failures cost the same.
        try:
            password_matches = verify_password(password, self.account.password_hash)
        except Exception:
            logger.exception("Error during password verification")
            return None
        if username_matches and password_matches:
            return self.account
        return None


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode((data + pad).encode("ascii"))
