"""Auth gate: turn a raw Authorization header into a verified Identity.

Trusts the token's embedded claims entirely and never touches the database,
so a token cannot be revoked before it expires.
"""

import logging

import jwt

from controle_financeiro.core.config import AuthConfig
from controle_financeiro.core.errors import AuthError, ForbiddenError
from controle_financeiro.core.roles import Capability
from controle_financeiro.core.security import decode_access_token
from controle_financeiro.schemas.auth import Identity

logger = logging.getLogger(__name__)

MSG_MISSING = "Acesso negado - Token não fornecido"
MSG_MALFORMED = "Token inválido ou mal formatado"
MSG_INVALID = "Token inválido ou expirado"
MSG_FORBIDDEN = "Acesso restrito a administradores."


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from 'Bearer <token>'; raise AuthError when absent or malformed."""
    if authorization is None or not authorization.strip():
        raise AuthError(MSG_MISSING)
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthError(MSG_MALFORMED)
    return parts[1]


def _parse_capabilities(raw: object) -> frozenset[Capability]:
    if not isinstance(raw, list):
        raise ValueError("caps claim must be a list")
    return frozenset(Capability(c) for c in raw)


def verify(authorization: str | None, config: AuthConfig) -> Identity:
    """
    Verify the header's token signature and expiry and return its Identity.
    Expired, tampered and incomplete tokens all fail with the same message.
    """
    token = extract_bearer_token(authorization)
    try:
        payload = decode_access_token(config, token)
        identity = Identity(
            id=payload["sub"],
            email=payload["email"],
            role=payload["role"],
            capabilities=_parse_capabilities(payload["caps"]),
        )
    except jwt.PyJWTError as e:
        logger.info("Token rejected: %s", e)
        raise AuthError(MSG_INVALID, cause=e) from e
    except (KeyError, ValueError, TypeError) as e:
        logger.info("Token rejected: bad claims (%s)", e)
        raise AuthError(MSG_INVALID, cause=e) from e
    return identity


def ensure_capability(identity: Identity, capability: Capability) -> Identity:
    """Raise ForbiddenError unless the identity carries the capability."""
    if not identity.can(capability):
        raise ForbiddenError(MSG_FORBIDDEN)
    return identity
