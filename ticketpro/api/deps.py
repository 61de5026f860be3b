from typing import List, Tuple
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt

from ticketpro.core.security import decode_access_token
from ticketpro.services.validation import has_permission

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def _roles_from(payload: dict) -> List[str]:
    roles = payload.get("roles") or []
    if not isinstance(roles, list):
        roles = [roles]
    return roles


def get_current_roles(token: str = Depends(oauth2_scheme)) -> List[str]:
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return _roles_from(payload)


def get_current_identity(token: str = Depends(oauth2_scheme)) -> Tuple[str, List[str]]:
    """Return (email, roles) from the JWT token."""
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return sub, _roles_from(payload)


def require_permission(permission: str):
    """Dependency rejecting callers whose roles do not grant ``permission``."""
    def checker(roles: List[str] = Depends(get_current_roles)):
        if not has_permission(roles, permission):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"No permission for this action: {permission}")
    return checker
