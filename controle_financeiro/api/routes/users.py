"""Admin endpoints: list profiles and change access levels."""

from typing import Annotated

from fastapi import APIRouter, Depends

from controle_financeiro.api.routes.auth import get_account_service, require
from controle_financeiro.core.roles import Capability
from controle_financeiro.schemas.auth import (
    Identity,
    MessageResponse,
    RoleUpdateRequest,
    UserListItem,
    UsersListResponse,
)
from controle_financeiro.services.accounts import MSG_ROLE_UPDATED, AccountService

router = APIRouter()

require_admin = require(Capability.USERS_MANAGE)


@router.get("", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[Identity, Depends(require_admin)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> UsersListResponse:
    """List all profiles ordered by e-mail (admin only). Password hashes are never returned."""
    profiles = accounts.list_profiles()
    return UsersListResponse(users=[UserListItem.model_validate(p) for p in profiles])


@router.patch("/{user_id}/role", response_model=MessageResponse)
def update_role(
    user_id: str,
    body: RoleUpdateRequest,
    _admin: Annotated[Identity, Depends(require_admin)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    """
    Change a profile's role_id (admin only). The user's current token keeps
    its old role until it expires; the new one applies from the next login.
    """
    accounts.update_role(user_id, body.role_id)
    return MessageResponse(message=MSG_ROLE_UPDATED)
