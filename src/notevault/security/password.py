"""Password hashing utilities."""

from passlib.context import CryptContext


class PasswordHasher:
    """One-way password hashing with a verify operation.

    Use bcrypt_sha256 to avoid bcrypt's 72-byte truncation issue on long passwords.
    This pre-hashes with SHA-256 before applying bcrypt.
    """

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt_sha256"],
            deprecated="auto",
            bcrypt_sha256__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a password."""
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        try:
            return self._context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # unrecognised or corrupt hash
            return False
