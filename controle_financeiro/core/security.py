"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from controle_financeiro.core.config import AuthConfig

# Single uniform bcrypt cost for every account.
BCRYPT_ROUNDS = 10

PASSWORD_MIN_LEN = 6

# Claims every session token must carry.
REQUIRED_CLAIMS = ("sub", "email", "role", "caps", "exp", "iat")


def normalize_email(email: str) -> str:
    """Lower-case and trim; all lookups and uniqueness checks use this form."""
    return email.strip().lower()


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt only uses the first 72 bytes; newer releases raise instead of truncating.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    config: AuthConfig,
    sub: str,
    email: str,
    role: str,
    capabilities: list[str],
    now: datetime | None = None,
) -> str:
    """Create a signed JWT with identity, role label, capabilities, iat and exp."""
    issued_at = now or datetime.now(UTC)
    expire = issued_at + timedelta(minutes=config.jwt_expire_minutes)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "email": email,
        "role": role,
        "caps": list(capabilities),
        "exp": expire,
        "iat": issued_at,
    }
    return jwt.encode(
        payload,
        config.jwt_secret,
        algorithm=config.jwt_algorithm,
    )


def decode_access_token(config: AuthConfig, token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, email, role, caps, exp, iat).
    Raises jwt.PyJWTError on invalid, expired or incomplete token.
    """
    return jwt.decode(
        token,
        config.jwt_secret,
        algorithms=[config.jwt_algorithm],
        options={"require": list(REQUIRED_CLAIMS)},
    )
