"""
Persistence for menu nodes.

Enforces the two-level shape on write: top nodes have no parent, sub nodes
point at an existing top node. Nothing here touches role grant strings.
"""

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from navconsole.models.menu import MenuNode, MenuType
from navconsole.schemas.menu_schemas import MenuCreateRequest, MenuOrderUpdate, MenuUpdateRequest
from navconsole.utils.icon_recommendations import get_icon_recommendations

logger = logging.getLogger(__name__)


class MenuStoreError(Exception):
    """Base class for menu store failures."""


class MenuNotFoundError(MenuStoreError):
    pass


class MenuConflictError(MenuStoreError):
    pass


class MenuValidationError(MenuStoreError):
    pass


def list_menus(db: Session, menu_type: MenuType | None = None) -> list[MenuNode]:
    query = db.query(MenuNode)
    if menu_type is not None:
        query = query.filter(MenuNode.menu_type == menu_type)
    return query.order_by(MenuNode.sort_order, MenuNode.id).all()


def get_menu(db: Session, menu_id: int) -> MenuNode:
    menu = db.get(MenuNode, menu_id)
    if menu is None:
        raise MenuNotFoundError(f"menu {menu_id} not found")
    return menu


def _check_unique_name(db: Session, name: str, exclude_id: int | None = None) -> None:
    query = db.query(MenuNode).filter(MenuNode.name == name)
    if exclude_id is not None:
        query = query.filter(MenuNode.id != exclude_id)
    if query.first() is not None:
        raise MenuConflictError(f"menu name '{name}' already exists")


def _check_parent(db: Session, parent_id: int | None, *, require_active: bool, child_id: int | None = None) -> None:
    if parent_id is None:
        raise MenuValidationError("a sub menu requires a parent top menu")
    if child_id is not None and parent_id == child_id:
        raise MenuValidationError("a menu cannot be its own parent")
    parent = db.get(MenuNode, parent_id)
    if parent is None:
        raise MenuValidationError(f"parent menu {parent_id} does not exist")
    if parent.menu_type != MenuType.top:
        raise MenuValidationError("sub menus can only be attached to top menus")
    if require_active and not parent.is_active:
        raise MenuValidationError(f"parent menu '{parent.name}' is inactive")


def create_menu(db: Session, data: MenuCreateRequest) -> MenuNode:
    _check_unique_name(db, data.name)
    if data.menu_type == MenuType.sub:
        _check_parent(db, data.parent_id, require_active=True)

    icon = data.icon
    if not icon:
        suggestions = get_icon_recommendations(data.name, data.label, data.menu_type)
        icon = suggestions[0].icon if suggestions else None

    menu = MenuNode(
        name=data.name,
        label=data.label,
        icon=icon,
        route=data.route,
        menu_type=data.menu_type,
        parent_id=data.parent_id if data.menu_type == MenuType.sub else None,
        sort_order=data.sort_order,
        is_active=data.is_active,
    )
    db.add(menu)
    db.commit()
    db.refresh(menu)
    logger.info("Created %s menu '%s' (id=%s)", menu.menu_type.value, menu.name, menu.id)
    return menu


def update_menu(db: Session, menu_id: int, data: MenuUpdateRequest) -> MenuNode:
    menu = get_menu(db, menu_id)
    if data.menu_type != menu.menu_type:
        raise MenuValidationError("menu type cannot be changed after creation")
    _check_unique_name(db, data.name, exclude_id=menu_id)
    if menu.menu_type == MenuType.sub:
        _check_parent(db, data.parent_id, require_active=False, child_id=menu_id)

    menu.name = data.name
    menu.label = data.label
    menu.icon = data.icon
    menu.route = data.route
    menu.parent_id = data.parent_id if menu.menu_type == MenuType.sub else None
    menu.sort_order = data.sort_order
    menu.is_active = data.is_active
    db.commit()
    db.refresh(menu)
    logger.info("Updated menu '%s' (id=%s)", menu.name, menu.id)
    return menu


def toggle_menu_status(db: Session, menu_id: int) -> MenuNode:
    menu = get_menu(db, menu_id)
    menu.is_active = not menu.is_active
    db.commit()
    db.refresh(menu)
    logger.info("Menu '%s' is now %s", menu.name, "active" if menu.is_active else "inactive")
    return menu


def delete_menu(db: Session, menu_id: int) -> None:
    menu = get_menu(db, menu_id)
    if db.query(MenuNode).filter(MenuNode.parent_id == menu_id).first() is not None:
        raise MenuConflictError(f"menu '{menu.name}' still has sub menus")
    db.delete(menu)
    db.commit()
    logger.info("Deleted menu '%s' (id=%s)", menu.name, menu_id)


def bulk_update_order(db: Session, updates: Iterable[MenuOrderUpdate]) -> list[MenuNode]:
    """Apply every sort-order update or none of them."""
    updates = list(updates)
    ids = [update.id for update in updates]
    if len(set(ids)) != len(ids):
        raise MenuValidationError("duplicate menu ids in order update")

    menus = {menu.id: menu for menu in db.query(MenuNode).filter(MenuNode.id.in_(ids)).all()} if ids else {}
    missing = sorted(set(ids) - set(menus))
    if missing:
        raise MenuNotFoundError(f"menus not found: {missing}")

    try:
        for update in updates:
            menus[update.id].sort_order = update.sort_order
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Bulk-updated sort order for %d menu(s)", len(updates))
    return [menus[menu_id] for menu_id in ids]
