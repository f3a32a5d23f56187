"""Session token issuing and verification."""

import logging
from datetime import timedelta
from uuid import UUID

from ...security.jwt import TokenCodec, TokenError
from ..exceptions import UnauthorizedError
from .interfaces import ISessionService

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


class SessionService(ISessionService):
    """Access tokens bound to an account id, valid for a fixed window. No refresh."""

    def __init__(self, codec: TokenCodec, ttl: timedelta = timedelta(hours=1)):
        self.codec = codec
        self.ttl = ttl

    @property
    def ttl_seconds(self) -> int:
        return int(self.ttl.total_seconds())

    def issue(self, account_id: UUID) -> str:
        return self.codec.sign({"sub": str(account_id), "type": ACCESS_TOKEN_TYPE}, self.ttl)

    def verify(self, token: str) -> UUID:
        try:
            claims = self.codec.verify(token)
        except TokenError as e:
            logger.debug(f"Rejected token: {e}")
            raise UnauthorizedError() from e

        if claims.get("type") != ACCESS_TOKEN_TYPE:
            raise UnauthorizedError()
        try:
            return UUID(str(claims.get("sub")))
        except ValueError as e:
            raise UnauthorizedError() from e
