"""Account service: registration, login, and admin role management over the profiles table."""

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from controle_financeiro.core.config import AuthConfig
from controle_financeiro.core.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from controle_financeiro.core.roles import (
    capabilities_for,
    default_role_for,
    is_valid_role_id,
    role_label,
)
from controle_financeiro.core.security import (
    PASSWORD_MIN_LEN,
    create_access_token,
    hash_password,
    normalize_email,
    verify_password,
)
from controle_financeiro.models import Profile

logger = logging.getLogger(__name__)

MSG_REQUIRED = "E-mail e senha são obrigatórios."
MSG_PASSWORD_SHORT = f"Senha deve ter pelo menos {PASSWORD_MIN_LEN} caracteres."
MSG_DUPLICATE = "E-mail já cadastrado."
MSG_REGISTERED = "Cadastro realizado com sucesso!"
MSG_REGISTER_FAILED = "Erro ao cadastrar."
MSG_BAD_CREDENTIALS = "E-mail ou senha incorretos."
MSG_LOOKUP_FAILED = "Erro ao consultar o banco de dados."
MSG_INVALID_ROLE = "Nível de acesso inválido. Use 1, 2, 3 ou 4."
MSG_USER_NOT_FOUND = "Usuário não encontrado."
MSG_ROLE_UPDATED = "Nível de acesso atualizado com sucesso!"


def _require_credentials(email: str | None, password: str | None) -> tuple[str, str]:
    """Fail with ValidationError unless both fields are present and non-empty."""
    if not email or not email.strip():
        raise ValidationError(MSG_REQUIRED, field="email")
    if not password:
        raise ValidationError(MSG_REQUIRED, field="password")
    return email, password


class AccountService:
    """
    Orchestrates registration and login against the credential store.

    The check-then-insert in register is not atomic; the unique index on
    profiles.email is what finally rejects a concurrent duplicate, and that
    violation is reported as the same ConflictError.
    """

    def __init__(self, db: Session, config: AuthConfig) -> None:
        self.db = db
        self.config = config

    def register(self, email: str | None, password: str | None) -> str:
        """Create a profile; returns the success message. Does not log the user in."""
        email, password = _require_credentials(email, password)
        if len(password) < PASSWORD_MIN_LEN:
            raise ValidationError(MSG_PASSWORD_SHORT, field="password")

        normalized = normalize_email(email)
        try:
            existing = self.db.query(Profile.id).filter(Profile.email == normalized).first()
        except SQLAlchemyError as e:
            logger.exception("Duplicate check failed for %s", normalized)
            raise StorageError(MSG_REGISTER_FAILED, cause=e) from e
        if existing is not None:
            raise ConflictError(MSG_DUPLICATE)

        role = default_role_for(normalized, self.config.admin_email)
        profile = Profile(
            email=normalized,
            password_hash=hash_password(password),
            role_id=int(role),
            updated_at=datetime.now(UTC),
        )
        try:
            self.db.add(profile)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info("Concurrent registration lost the insert race for %s", normalized)
            raise ConflictError(MSG_DUPLICATE, cause=e) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Insert failed for %s", normalized)
            raise StorageError(MSG_REGISTER_FAILED, cause=e) from e

        logger.info("Registered %s (role_id=%s)", normalized, int(role))
        return MSG_REGISTERED

    def login(self, email: str | None, password: str | None) -> str:
        """
        Verify credentials and return a signed session token.

        Unknown email and wrong password raise the same AuthError. A storage
        fault during the lookup raises StorageError instead.
        """
        email, password = _require_credentials(email, password)
        normalized = normalize_email(email)

        try:
            profile = self.db.query(Profile).filter(Profile.email == normalized).first()
        except SQLAlchemyError as e:
            logger.exception("Profile lookup failed for %s", normalized)
            raise StorageError(MSG_LOOKUP_FAILED, cause=e) from e

        if profile is None:
            logger.info("Login rejected for %s: no such profile", normalized)
            raise AuthError(MSG_BAD_CREDENTIALS)
        if not verify_password(password, profile.password_hash):
            logger.info("Login rejected for %s: password mismatch", normalized)
            raise AuthError(MSG_BAD_CREDENTIALS)

        capabilities = sorted(c.value for c in capabilities_for(profile.role_id))
        token = create_access_token(
            self.config,
            sub=profile.id,
            email=profile.email,
            role=role_label(profile.role_id),
            capabilities=capabilities,
        )
        logger.info("Login succeeded for %s", normalized)
        return token

    def list_profiles(self) -> list[Profile]:
        """All profiles ordered by email."""
        try:
            return self.db.query(Profile).order_by(Profile.email).all()
        except SQLAlchemyError as e:
            logger.exception("Listing profiles failed")
            raise StorageError(MSG_LOOKUP_FAILED, cause=e) from e

    def update_role(self, profile_id: str, role_id: object) -> Profile:
        """
        Set a profile's role_id. Existing tokens keep their old role until
        they expire; the new role applies from the user's next login.
        """
        if not is_valid_role_id(role_id):
            raise ValidationError(MSG_INVALID_ROLE, field="role_id")
        try:
            profile = self.db.query(Profile).filter(Profile.id == profile_id).first()
            if profile is None:
                raise NotFoundError(MSG_USER_NOT_FOUND)
            previous = profile.role_id
            profile.role_id = role_id
            profile.updated_at = datetime.now(UTC)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Role update failed for profile %s", profile_id)
            raise StorageError(MSG_LOOKUP_FAILED, cause=e) from e

        logger.info(
            "Role changed for %s: %s -> %s", profile.email, previous, role_id
        )
        return profile
