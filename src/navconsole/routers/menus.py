"""
Router for navigation menu management.

Top menus (GLinks) and their sub menus (PLinks) are stored as a flat list;
the tree endpoints assemble the two-level view.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from navconsole.db import get_db
from navconsole.dependencies.authz import get_current_user, require_menu_permission
from navconsole.models.menu import MENU_ICONS, MenuType
from navconsole.models.user import User
from navconsole.schemas.menu_schemas import (
    BulkOrderUpdateRequest,
    IconRecommendationSchema,
    MenuCreateRequest,
    MenuSchema,
    MenuTreeNodeSchema,
    MenuTreeResponse,
    MenuUpdateRequest,
)
from navconsole.services import menu_store
from navconsole.services.menu_tree import MenuTree, build_tree, coerce_menu_type
from navconsole.services.permission_codec import Capability
from navconsole.utils.admin_access import can_see_menu
from navconsole.utils.icon_recommendations import get_icon_recommendations

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/menus", tags=["Menu_Management"])

# Module-level dependency objects to avoid calling Depends() in function defaults
db_dependency = Depends(get_db)
current_user_dependency = Depends(get_current_user)
menu_manage_dependency = Depends(require_menu_permission("configuration", "menus", Capability.manage))


def _store_error(exc: menu_store.MenuStoreError) -> HTTPException:
    if isinstance(exc, menu_store.MenuNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, menu_store.MenuConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _tree_response(tree: MenuTree) -> MenuTreeResponse:
    return MenuTreeResponse(
        tree=[
            MenuTreeNodeSchema(
                menu=MenuSchema.model_validate(node.entry),
                children=[MenuSchema.model_validate(child) for child in node.children],
            )
            for node in tree
        ],
        orphan_ids=[orphan.id for orphan in tree.orphans],
    )


# ============================================================================
# Read endpoints
# ============================================================================


@router.get(
    "",
    response_model=list[MenuSchema],
    summary="List menus",
    description="Flat list of every menu node, all types and statuses, optionally filtered by type.",
)
def list_menus(
    menu_type: Annotated[str | None, Query(alias="type", description="top or sub (glink/plink accepted)")] = None,
    db: Session = db_dependency,
    _: User = current_user_dependency,
):
    try:
        resolved = coerce_menu_type(menu_type) if menu_type else None
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"unknown menu type '{menu_type}'") from exc
    return menu_store.list_menus(db, resolved)


@router.get(
    "/tree",
    response_model=MenuTreeResponse,
    summary="Menu tree",
    description="Active top menus with their active sub menus, in display order.",
)
def get_menu_tree(db: Session = db_dependency, _: User = current_user_dependency):
    return _tree_response(build_tree(menu_store.list_menus(db)))


@router.get(
    "/navigation",
    response_model=MenuTreeResponse,
    summary="Navigation for the current user",
    description="Menu tree restricted to the targets the caller's role holds a grant on.",
)
def get_navigation(db: Session = db_dependency, current_user: User = current_user_dependency):
    tree = build_tree(menu_store.list_menus(db))
    return _tree_response(tree.filter(lambda top, sub: can_see_menu(current_user, top, sub)))


@router.get("/icons", response_model=list[str], summary="Available menu icons")
def list_icons(_: User = current_user_dependency):
    return sorted(MENU_ICONS)


@router.get(
    "/icon-recommendations",
    response_model=list[IconRecommendationSchema],
    summary="Suggest icons",
    description="Keyword-based icon suggestions for a menu name and label.",
)
def icon_recommendations(
    name: str = "",
    label: str = "",
    menu_type: Annotated[MenuType, Query(alias="menuType")] = MenuType.top,
    current_icon: Annotated[str | None, Query(alias="currentIcon")] = None,
    _: User = current_user_dependency,
):
    return [
        IconRecommendationSchema(icon=rec.icon, reason=rec.reason, category=rec.category)
        for rec in get_icon_recommendations(name, label, menu_type, current_icon)
    ]


@router.get("/{menu_id}", response_model=MenuSchema, summary="Get menu")
def get_menu(menu_id: int, db: Session = db_dependency, _: User = current_user_dependency):
    try:
        return menu_store.get_menu(db, menu_id)
    except menu_store.MenuStoreError as exc:
        raise _store_error(exc) from exc


# ============================================================================
# Write endpoints
# ============================================================================


@router.post(
    "",
    response_model=MenuSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create menu",
    description="Create a top menu, or a sub menu under an active top menu.",
)
def create_menu(request: MenuCreateRequest, db: Session = db_dependency, _: User = menu_manage_dependency):
    try:
        return menu_store.create_menu(db, request)
    except menu_store.MenuStoreError as exc:
        raise _store_error(exc) from exc
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating menu: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create menu") from e


@router.patch(
    "/bulk-update-order",
    summary="Bulk update menu order",
    description="Apply a batch of sort orders in one transaction; nothing is applied if any id is unknown.",
)
def bulk_update_order(request: BulkOrderUpdateRequest, db: Session = db_dependency, _: User = menu_manage_dependency):
    try:
        menus = menu_store.bulk_update_order(db, request.updates)
    except menu_store.MenuStoreError as exc:
        raise _store_error(exc) from exc
    except Exception as e:
        logger.error(f"Error updating menu order: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update menu order") from e
    return {"message": "Menu order updated successfully", "updated": len(menus)}


@router.put("/{menu_id}", response_model=MenuSchema, summary="Update menu")
def update_menu(menu_id: int, request: MenuUpdateRequest, db: Session = db_dependency, _: User = menu_manage_dependency):
    try:
        return menu_store.update_menu(db, menu_id, request)
    except menu_store.MenuStoreError as exc:
        raise _store_error(exc) from exc
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating menu {menu_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update menu") from e


@router.patch("/{menu_id}/toggle-status", response_model=MenuSchema, summary="Toggle menu status")
def toggle_menu_status(menu_id: int, db: Session = db_dependency, _: User = menu_manage_dependency):
    try:
        return menu_store.toggle_menu_status(db, menu_id)
    except menu_store.MenuStoreError as exc:
        raise _store_error(exc) from exc


@router.delete("/{menu_id}", summary="Delete menu")
def delete_menu(menu_id: int, db: Session = db_dependency, _: User = menu_manage_dependency):
    try:
        menu_store.delete_menu(db, menu_id)
    except menu_store.MenuStoreError as exc:
        raise _store_error(exc) from exc
    return {"deleted": menu_id}
