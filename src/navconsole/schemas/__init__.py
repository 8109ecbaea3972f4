from .auth_schemas import TokenResponse, UserResponse
from .menu_schemas import (
    BulkOrderUpdateRequest,
    MenuCreateRequest,
    MenuOrderUpdate,
    MenuSchema,
    MenuUpdateRequest,
)
from .role_schemas import RoleCreateRequest, RoleSchema, RoleUpdateRequest

__all__ = [
    "BulkOrderUpdateRequest",
    "MenuCreateRequest",
    "MenuOrderUpdate",
    "MenuSchema",
    "MenuUpdateRequest",
    "RoleCreateRequest",
    "RoleSchema",
    "RoleUpdateRequest",
    "TokenResponse",
    "UserResponse",
]
