"""Pydantic request/response schemas."""

from controle_financeiro.schemas.auth import (
    CredentialsRequest,
    DashboardResponse,
    Identity,
    MeResponse,
    MessageResponse,
    RoleUpdateRequest,
    TokenResponse,
    UserListItem,
    UsersListResponse,
)
from controle_financeiro.schemas.health import HealthResponse
from controle_financeiro.schemas.orcamento import OrcamentoCreate, OrcamentoOut, ResumoResponse

__all__ = [
    "CredentialsRequest",
    "DashboardResponse",
    "HealthResponse",
    "Identity",
    "MeResponse",
    "MessageResponse",
    "OrcamentoCreate",
    "OrcamentoOut",
    "ResumoResponse",
    "RoleUpdateRequest",
    "TokenResponse",
    "UserListItem",
    "UsersListResponse",
]
