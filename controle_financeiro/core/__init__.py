"""Core app configuration, database and error types."""

from controle_financeiro.core.config import AuthConfig, get_settings, settings
from controle_financeiro.core.database import get_db

__all__ = ["AuthConfig", "get_settings", "settings", "get_db"]
