from .menu import MENU_ICONS, MenuNode, MenuType
from .role import Role
from .user import User

__all__ = [
    "MENU_ICONS",
    "MenuNode",
    "MenuType",
    "Role",
    "User",
]
