from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from navconsole.db import get_db
from navconsole.models.user import User as DBUser
from navconsole.services.permission_codec import Capability, GrantTarget
from navconsole.utils.admin_access import check_menu_permission
from navconsole.utils.auth import decode_jwt, get_user

bearer = HTTPBearer(auto_error=False)

# Module-level dependency objects to avoid calling Depends() in function defaults
bearer_dep = Depends(bearer)
db_dep = Depends(get_db)


def get_current_user(
    cred: HTTPAuthorizationCredentials = bearer_dep,
    db: Session = db_dep,
) -> DBUser:
    if cred is None or cred.scheme.lower() != "bearer":
        raise HTTPException(401, "missing or invalid authorization header", headers={"WWW-Authenticate": "Bearer"})

    payload = decode_jwt(cred.credentials)
    if not payload or payload.get("type") != "access":
        raise HTTPException(401, "invalid or expired token", headers={"WWW-Authenticate": "Bearer"})

    user = get_user(db, payload.get("sub"))
    if not user or not user.is_active:
        raise HTTPException(401, "user not found or inactive")

    if payload.get("ver") != user.token_version:
        raise HTTPException(401, "token no longer valid (revoked)")

    return user


current_user_dependency = Depends(get_current_user)


def require_menu_permission(top: str, sub: str | None = None, level: Capability | str = Capability.read):
    target = GrantTarget(top, sub)
    required = Capability(level)

    def checker(user: DBUser = current_user_dependency) -> DBUser:
        if not check_menu_permission(user, target.top, target.sub, required):
            raise HTTPException(403, f"missing permission: {target.key}:{required.value}")
        return user

    return checker
