"""
Router for role management.

A role carries a flat array of grant strings. PUT replaces that array as a
whole; the editor on the client computes the full list before saving.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from navconsole.db import get_db
from navconsole.dependencies.authz import require_menu_permission
from navconsole.models.role import Role
from navconsole.models.user import User
from navconsole.schemas.role_schemas import RoleCreateRequest, RoleListResponse, RoleSchema, RoleUpdateRequest
from navconsole.services.permission_codec import Capability, normalize_permissions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/roles", tags=["Role_Management"])

# Module-level dependency objects to avoid calling Depends() in function defaults
db_dependency = Depends(get_db)
role_read_dependency = Depends(require_menu_permission("configuration", "roles", Capability.read))
role_manage_dependency = Depends(require_menu_permission("configuration", "roles", Capability.manage))


def _get_role_or_404(db: Session, role_id: int) -> Role:
    role = db.get(Role, role_id)
    if role is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Role not found")
    return role


@router.get(
    "",
    response_model=RoleListResponse,
    summary="List roles",
    description="All roles with their grant strings, optionally only the active ones.",
)
def list_roles(
    active_only: Annotated[bool, Query(alias="activeOnly")] = False,
    db: Session = db_dependency,
    _: User = role_read_dependency,
):
    query = db.query(Role)
    if active_only:
        query = query.filter(Role.is_active.is_(True))
    return RoleListResponse(roles=[RoleSchema.model_validate(role) for role in query.order_by(Role.id).all()])


@router.get("/{role_id}", response_model=RoleSchema, summary="Get role")
def get_role(role_id: int, db: Session = db_dependency, _: User = role_read_dependency):
    return _get_role_or_404(db, role_id)


@router.post(
    "",
    response_model=RoleSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
)
def create_role(request: RoleCreateRequest, db: Session = db_dependency, _: User = role_manage_dependency):
    if db.query(Role).filter(Role.name == request.name).first() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Role '{request.name}' already exists")

    try:
        role = Role(
            name=request.name,
            display_name=request.display_name,
            description=request.description,
            is_active=request.is_active,
            permissions=normalize_permissions(request.permissions),
        )
        db.add(role)
        db.commit()
        db.refresh(role)
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating role: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create role") from e

    logger.info("Created role '%s' with %d grant(s)", role.name, len(role.permissions))
    return role


@router.put(
    "/{role_id}",
    response_model=RoleSchema,
    summary="Update role",
    description="Update role fields. A ``permissions`` array replaces the stored one entirely.",
)
def update_role(role_id: int, request: RoleUpdateRequest, db: Session = db_dependency, _: User = role_manage_dependency):
    role = _get_role_or_404(db, role_id)

    try:
        if request.display_name is not None:
            role.display_name = request.display_name
        if request.description is not None:
            role.description = request.description
        if request.is_active is not None:
            role.is_active = request.is_active
        if request.permissions is not None:
            role.permissions = normalize_permissions(request.permissions)
        db.commit()
        db.refresh(role)
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating role {role_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update role") from e

    logger.info("Updated role '%s' (%d grant(s))", role.name, len(role.permissions))
    return role


@router.patch("/{role_id}/toggle-status", response_model=RoleSchema, summary="Toggle role status")
def toggle_role_status(role_id: int, db: Session = db_dependency, _: User = role_manage_dependency):
    role = _get_role_or_404(db, role_id)
    role.is_active = not role.is_active
    db.commit()
    db.refresh(role)
    logger.info("Role '%s' is now %s", role.name, "active" if role.is_active else "inactive")
    return role


@router.delete("/{role_id}", summary="Delete role")
def delete_role(role_id: int, db: Session = db_dependency, _: User = role_manage_dependency):
    role = _get_role_or_404(db, role_id)
    if role.users:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Role '{role.name}' is still assigned to {len(role.users)} user(s)",
        )
    db.delete(role)
    db.commit()
    logger.info("Deleted role '%s' (id=%s)", role.name, role_id)
    return {"deleted": role_id}
