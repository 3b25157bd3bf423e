"""FastAPI authentication and authorization dependencies."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from campus.auth.jwt import verify_token
from campus.auth.roles import Permission, Role, can

_bearer = HTTPBearer()


@dataclass(frozen=True)
class Principal:
    """The verified caller of a request."""

    uid: str
    role: Role
    name: str | None = None

    def can(self, permission: Permission) -> bool:
        return can(self.role, permission)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(_bearer),
) -> Principal:
    """
    Verify the bearer token and return the caller.

    Raises 401 on a bad token or an unknown role.
    """
    try:
        payload = verify_token(credentials.credentials)
        role = Role.parse(payload.get("role"))
    except (jwt.InvalidTokenError, ValueError) as e:
        raise HTTPException(status_code=401, detail=str(e)) from e

    return Principal(uid=payload["sub"], role=role, name=payload.get("name"))


def require(permission: Permission) -> Callable[..., Awaitable[Principal]]:
    """Dependency factory: the caller must hold ``permission`` or gets 403."""

    async def _dependency(user: Principal = Depends(get_current_user)) -> Principal:
        if not user.can(permission):
            raise HTTPException(status_code=403, detail="You do not have permission to perform this action.")
        return user

    return _dependency
