"""Request/response schemas for auth, session and admin endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from controle_financeiro.core.roles import Capability


class CredentialsRequest(BaseModel):
    """Body for /register and /login. Presence and length are checked by the account service."""

    email: str | None = Field(default=None, description="E-mail")
    password: str | None = Field(default=None, description="Senha")


class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    """JWT returned after a successful login."""

    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")


class Identity(BaseModel):
    """Identity resolved from a verified token. No database lookup involved."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    role: str
    capabilities: frozenset[Capability] = frozenset()

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities


class MeResponse(BaseModel):
    email: str
    role: str


class DashboardResponse(BaseModel):
    message: str
    user: MeResponse


class UserListItem(BaseModel):
    """Profile entry for the admin list (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role_id: int
    updated_at: datetime | None = None


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserListItem]


class RoleUpdateRequest(BaseModel):
    # Strict: JSON true must not coerce to 1 (Acesso Total).
    role_id: StrictInt | None = Field(default=None, description="1 Acesso Total .. 4 Apenas Ler")
