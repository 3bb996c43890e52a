"""FastAPI dependency utilities."""

from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.domain.entities import Identity, Role
from app.domain.exceptions import AuthenticationError
from app.infrastructure.security import resolve_identity

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def get_current_identity(token: str | None = Depends(oauth2_scheme)) -> Identity:
    """Return the identity asserted by the bearer token of the request."""

    try:
        return resolve_identity(token)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def require_roles(*roles: Role) -> Callable[..., Identity]:
    """Build a dependency rejecting identities outside ``roles``."""

    def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        if not identity.has_role(*roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return identity

    return dependency


require_admin = require_roles(Role.ADMIN)
require_manager = require_roles(Role.MANAGER, Role.ADMIN)
