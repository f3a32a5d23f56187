"""JWT token codec."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt


class TokenError(Exception):
    """Token could not be verified: bad signature, malformed or expired."""


class TokenCodec:
    """Signs and verifies claim sets with a shared secret."""

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def sign(self, claims: Dict[str, Any], ttl: timedelta) -> str:
        """Sign ``claims`` with an ``exp`` of now + ``ttl``."""
        now = datetime.now(timezone.utc)
        to_encode = claims.copy()
        to_encode.update({"iat": now, "exp": now + ttl})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """Return the claims of a valid token, or raise ``TokenError``."""
        try:
            # jose checks the signature and exp; a missing exp is rejected too
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require_exp": True},
            )
        except JWTError as e:
            raise TokenError(str(e)) from e
