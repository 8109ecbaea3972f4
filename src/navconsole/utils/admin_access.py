from navconsole.services.permission_codec import Capability, has_any_grant, has_permission


def is_system_admin(user) -> bool:
    return bool(getattr(user, "is_system_admin", False))


def role_permissions(user) -> list[str]:
    """Grant strings of the user's role; an inactive or missing role grants nothing."""
    role = getattr(user, "role", None)
    if role is None or not getattr(role, "is_active", True):
        return []
    return list(getattr(role, "permissions", None) or [])


def check_menu_permission(user, top: str, sub: str | None = None, level: Capability | str = Capability.read) -> bool:
    """System admins pass; everyone else needs ``level`` (or higher) on the target."""
    if is_system_admin(user):
        return True
    return has_permission(role_permissions(user), top, sub, level)


def can_see_menu(user, top: str, sub: str | None = None) -> bool:
    if is_system_admin(user):
        return True
    return has_any_grant(role_permissions(user), top, sub)
