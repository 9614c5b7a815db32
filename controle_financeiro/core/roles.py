"""
Roles and capabilities.

role_id is stored on the profile (1-4). At login it is resolved once into a
role label and a capability set, both embedded in the session token.

Roles 2, 3 and 4 currently grant the same capabilities: only administrators
are distinguished. The finer tiers exist in the data model and the admin UI
but nothing enforces them yet.
"""

from enum import Enum, IntEnum


class Role(IntEnum):
    """Access level stored in profiles.role_id."""

    ADMINISTRATOR = 1  # Acesso Total
    EDIT = 2  # Editar
    PARTIAL_EDIT = 3  # Editar partes específicas
    READ_ONLY = 4  # Apenas Ler


class Capability(str, Enum):
    ENTRIES_READ = "entries.read"
    ENTRIES_WRITE = "entries.write"
    USERS_MANAGE = "users.manage"


ADMIN_LABEL = "Administrador"
DEFAULT_LABEL = "Ver"

ROLE_DESCRIPTIONS: dict[Role, str] = {
    Role.ADMINISTRATOR: "Acesso Total",
    Role.EDIT: "Editar",
    Role.PARTIAL_EDIT: "Editar partes específicas",
    Role.READ_ONLY: "Apenas Ler",
}

_ROLE_IDS = frozenset(r.value for r in Role)

_MEMBER_CAPABILITIES = frozenset({Capability.ENTRIES_READ, Capability.ENTRIES_WRITE})

ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.ADMINISTRATOR: _MEMBER_CAPABILITIES | {Capability.USERS_MANAGE},
    Role.EDIT: _MEMBER_CAPABILITIES,
    Role.PARTIAL_EDIT: _MEMBER_CAPABILITIES,
    Role.READ_ONLY: _MEMBER_CAPABILITIES,
}


def is_valid_role_id(role_id: object) -> bool:
    """True for an int (not bool) in the closed role set."""
    if isinstance(role_id, bool) or not isinstance(role_id, int):
        return False
    return role_id in _ROLE_IDS


def role_label(role_id: int) -> str:
    """Label baked into tokens: 'Administrador' for role 1, 'Ver' otherwise."""
    return ADMIN_LABEL if role_id == Role.ADMINISTRATOR else DEFAULT_LABEL


def capabilities_for(role_id: int) -> frozenset[Capability]:
    """Capabilities for a stored role_id; unknown ids get the member set."""
    if not is_valid_role_id(role_id):
        return _MEMBER_CAPABILITIES
    return ROLE_CAPABILITIES[Role(role_id)]


def default_role_for(normalized_email: str, admin_email: str | None) -> Role:
    """Role assigned at registration."""
    if admin_email and normalized_email == admin_email:
        return Role.ADMINISTRATOR
    return Role.READ_ONLY
