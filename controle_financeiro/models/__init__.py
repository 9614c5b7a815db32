"""SQLAlchemy ORM models."""

from controle_financeiro.models.base import Base
from controle_financeiro.models.orcamento import Orcamento
from controle_financeiro.models.profile import Profile

__all__ = ["Base", "Orcamento", "Profile"]
