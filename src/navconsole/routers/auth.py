import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException
from sqlalchemy.orm import Session

from navconsole.db import get_db
from navconsole.dependencies.authz import get_current_user
from navconsole.models.user import User as DBUser
from navconsole.schemas.auth_schemas import TokenResponse, UserResponse
from navconsole.utils import auth as auth_utils
from navconsole.utils.admin_access import is_system_admin, role_permissions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])
# module-level dependency to avoid calling Depends() inside function defaults
db_dependency = Depends(get_db)
current_user_dependency = Depends(get_current_user)


def _user_response(user: DBUser) -> UserResponse:
    return UserResponse(
        username=user.username,
        email=user.email,
        is_system_admin=is_system_admin(user),
        role=user.role.name if user.role else None,
        permissions=role_permissions(user),
    )


@router.post(
    "/login",
    summary="Login with username/password",
    description="Authenticate against the local user store and receive an access JWT.",
    response_model=TokenResponse,
)
def login(
    username: Annotated[str, Form(description="Username for authentication (e.g., jsmith)")],
    password: Annotated[
        str,
        Form(description="User password", json_schema_extra={"format": "password"}),
    ],
    db: Session = db_dependency,
):
    user = auth_utils.authenticate_user(db, username, password)
    if not user:
        logger.info("Rejected login for '%s'", auth_utils.normalize_username(username))
        raise HTTPException(status_code=401, detail="invalid credentials", headers={"WWW-Authenticate": "Bearer"})

    user.last_login = datetime.now(UTC)
    db.commit()

    return TokenResponse(access_token=auth_utils.create_access_token(user), token_type="bearer", user=_user_response(user))


@router.get("/me", response_model=UserResponse, summary="Current user")
def me(current_user: DBUser = current_user_dependency):
    return _user_response(current_user)
