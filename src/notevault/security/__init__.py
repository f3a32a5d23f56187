"""Security utilities."""

from .jwt import TokenCodec, TokenError
from .password import PasswordHasher

__all__ = [
    "PasswordHasher",
    "TokenCodec",
    "TokenError",
]
