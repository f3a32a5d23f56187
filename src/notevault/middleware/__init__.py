"""Middleware for authentication and other cross-cutting concerns."""

from .auth import JWTBearer, get_current_principal

__all__ = ["get_current_principal", "JWTBearer"]
