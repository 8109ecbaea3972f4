"""
Bootstrap the default navigation menu, roles, and seed users for the console.

Usage (from repository root):

    uv run python scripts/bootstrap_menus.py

Optional arguments let you override default passwords or skip user creation:

    uv run python scripts/bootstrap_menus.py --admin-password S3cret --skip-default-users
"""

import argparse
from collections.abc import Iterable

from navconsole.db import SessionLocal
from navconsole.db.init_db import init_db
from navconsole.models.menu import MenuNode, MenuType
from navconsole.models.role import Role
from navconsole.services.permission_codec import normalize_permissions
from navconsole.utils.auth import create_user

# (name, label, icon, route, children)
DEFAULT_MENUS: tuple[tuple[str, str, str, str | None, tuple[tuple[str, str, str, str], ...]], ...] = (
    ("dashboard", "Dashboard", "LayoutDashboard", "/dashboard", ()),
    (
        "ports",
        "Ports",
        "Anchor",
        None,
        (
            ("port-list", "Port List", "List", "/ports"),
            ("terminals", "Terminals", "Ship", "/terminals"),
        ),
    ),
    (
        "organizations",
        "Organizations",
        "Building2",
        None,
        (("organization-list", "Organization List", "Building", "/organizations"),),
    ),
    (
        "configuration",
        "Configuration",
        "Settings",
        None,
        (
            ("menus", "Menu Management", "Menu", "/configuration/menus"),
            ("roles", "Roles & Permissions", "Key", "/configuration/roles"),
            ("users", "Users", "Users", "/configuration/users"),
        ),
    ),
)

DEFAULT_ROLES: dict[str, tuple[str, Iterable[str]]] = {
    "administrator": ("Administrator", ("*:read,write,manage",)),
    "operator": (
        "Operator",
        (
            "dashboard:read",
            "ports:read",
            "ports:port-list:read,write",
            "ports:terminals:read,write",
            "organizations:read",
            "organizations:organization-list:read",
        ),
    ),
    "viewer": ("Viewer", ("dashboard:read", "ports:read", "ports:port-list:read")),
}

# (username, is_system_admin, role, default password)
DEFAULT_USERS: tuple[tuple[str, bool, str, str], ...] = (
    ("admin", True, "administrator", "admin123"),
    ("operator", False, "operator", "operator123"),
    ("viewer", False, "viewer", "viewer123"),
)


def ensure_menu(db, name: str, label: str, icon: str, route: str | None, menu_type: MenuType, sort_order: int, parent: MenuNode | None = None) -> MenuNode:
    menu = db.query(MenuNode).filter(MenuNode.name == name).one_or_none()
    if menu:
        return menu
    menu = MenuNode(
        name=name,
        label=label,
        icon=icon,
        route=route,
        menu_type=menu_type,
        parent_id=parent.id if parent else None,
        sort_order=sort_order,
        is_active=True,
    )
    db.add(menu)
    db.flush()
    return menu


def ensure_role(db, name: str, display_name: str, permissions: Iterable[str]) -> Role:
    role = db.query(Role).filter(Role.name == name).one_or_none()
    if role:
        return role
    role = Role(name=name, display_name=display_name, description=f"Auto-created role: {name}", permissions=normalize_permissions(permissions))
    db.add(role)
    db.flush()
    return role


def bootstrap(default_passwords: dict[str, str], skip_users: bool = False) -> None:
    init_db()
    session = SessionLocal()
    try:
        for top_order, (name, label, icon, route, children) in enumerate(DEFAULT_MENUS, start=1):
            top = ensure_menu(session, name, label, icon, route, MenuType.top, top_order)
            for sub_order, (sub_name, sub_label, sub_icon, sub_route) in enumerate(children, start=1):
                ensure_menu(session, sub_name, sub_label, sub_icon, sub_route, MenuType.sub, sub_order, parent=top)

        roles: dict[str, Role] = {}
        for role_name, (display_name, grants) in DEFAULT_ROLES.items():
            roles[role_name] = ensure_role(session, role_name, display_name, grants)
        session.commit()

        if not skip_users:
            for username, is_system_admin, role_name, default_password in DEFAULT_USERS:
                password = default_passwords.get(username, default_password)
                create_user(session, username, password, is_system_admin=is_system_admin, role_id=roles[role_name].id)
    finally:
        session.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bootstrap default menus, roles and users.")
    parser.add_argument("--admin-password", help="Password for seeded 'admin' user.")
    parser.add_argument("--operator-password", help="Password for seeded 'operator' user.")
    parser.add_argument("--viewer-password", help="Password for seeded 'viewer' user.")
    parser.add_argument(
        "--skip-default-users",
        action="store_true",
        help="Only create menus/roles; skip creating default users.",
    )
    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()
    password_overrides = {
        key: value
        for key, value in {
            "admin": args.admin_password,
            "operator": args.operator_password,
            "viewer": args.viewer_password,
        }.items()
        if value
    }
    bootstrap(password_overrides, skip_users=args.skip_default_users)
    print("Bootstrap completed successfully.")


if __name__ == "__main__":
    main()
