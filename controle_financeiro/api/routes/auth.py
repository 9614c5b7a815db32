"""Register, login, session endpoints and the auth dependencies (get_current_identity, require)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, status
from sqlalchemy.orm import Session

from controle_financeiro.core.config import AuthConfig
from controle_financeiro.core.database import get_db
from controle_financeiro.core.errors import ConfigurationError
from controle_financeiro.core.roles import Capability
from controle_financeiro.schemas.auth import (
    CredentialsRequest,
    DashboardResponse,
    Identity,
    MeResponse,
    MessageResponse,
    TokenResponse,
)
from controle_financeiro.services import auth_gate
from controle_financeiro.services.accounts import AccountService

router = APIRouter()


def get_auth_config(request: Request) -> AuthConfig:
    """Dependency: AuthConfig built at startup. Raises ConfigurationError (500) when it is missing."""
    config = getattr(request.app.state, "auth_config", None)
    if config is None:
        raise ConfigurationError("Erro no servidor")
    return config


def get_account_service(
    db: Annotated[Session, Depends(get_db)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
) -> AccountService:
    return AccountService(db, config)


def get_current_identity(
    config: Annotated[AuthConfig, Depends(get_auth_config)],
    authorization: Annotated[str | None, Header()] = None,
) -> Identity:
    """Dependency: require a valid Bearer JWT and return its Identity. Raises 401 if missing or invalid."""
    return auth_gate.verify(authorization, config)


def require(capability: Capability) -> Callable[..., Identity]:
    """Dependency factory: authenticated identity holding capability, else 403."""

    def _dependency(
        identity: Annotated[Identity, Depends(get_current_identity)],
    ) -> Identity:
        return auth_gate.ensure_capability(identity, capability)

    return _dependency


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: CredentialsRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    """Create an account. Does not log the user in."""
    message = accounts.register(body.email, body.password)
    return MessageResponse(message=message)


@router.post("/login", response_model=TokenResponse)
def login(
    body: CredentialsRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> TokenResponse:
    """
    Authenticate with e-mail and password; returns a JWT valid for one hour.
    Include the token in the Authorization header as: Bearer <token>
    """
    return TokenResponse(token=accounts.login(body.email, body.password))


@router.get("/me", response_model=MeResponse)
def me(identity: Annotated[Identity, Depends(get_current_identity)]) -> MeResponse:
    """E-mail and role label as carried by the token."""
    return MeResponse(email=identity.email, role=identity.role)


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(identity: Annotated[Identity, Depends(get_current_identity)]) -> DashboardResponse:
    return DashboardResponse(
        message="Bem-vindo à área protegida 🔐",
        user=MeResponse(email=identity.email, role=identity.role),
    )
