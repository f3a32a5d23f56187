"""Authentication middleware."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.exceptions import UnauthorizedError


class JWTBearer(HTTPBearer):
    """JWT Bearer token authentication.

    Resolves the request's principal. A missing header, a non-Bearer scheme
    and an invalid or expired token all end in the same 401.
    """

    def __init__(self):
        super(JWTBearer, self).__init__(auto_error=False)

    async def __call__(self, request: Request) -> UUID:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if not credentials or credentials.scheme.lower() != "bearer":
            raise UnauthorizedError()

        return request.app.state.context.sessions.verify(credentials.credentials)


# Dependency for getting the current principal from the JWT
async def get_current_principal(principal_id: UUID = Depends(JWTBearer())) -> UUID:
    """Get current authenticated account ID."""
    return principal_id
