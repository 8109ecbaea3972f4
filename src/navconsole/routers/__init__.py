from . import (  # noqa: F401
    auth,
    health,
    menus,
    roles,
)

__all__ = [
    "auth",
    "health",
    "menus",
    "roles",
]
