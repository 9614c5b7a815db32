"""ORM model for user profiles (credential store)."""

import uuid

from sqlalchemy import Column, DateTime, Integer, String, func

from controle_financeiro.models.base import Base


def _new_profile_id() -> str:
    return str(uuid.uuid4())


class Profile(Base):
    """
    User account for JWT authentication and role-based access control.

    email is stored normalized (trimmed, lower-case) and is unique.
    role_id: 1 Acesso Total, 2 Editar, 3 Editar partes específicas, 4 Apenas Ler.
    """

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_new_profile_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role_id = Column(Integer, nullable=False, default=4)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
