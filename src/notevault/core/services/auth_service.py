"""Authentication service implementation."""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...security.password import PasswordHasher
from ..exceptions import ConflictError, InvalidCredentialsError, NotFoundError
from ..repositories.account_repository import AccountRepository
from ..schemas.auth import AccountResponse, LoginRequest, RegisterRequest, TokenResponse
from .interfaces import IAuthService, ISessionService

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """Authentication service implementation."""

    def __init__(self, session: AsyncSession, hasher: PasswordHasher, sessions: ISessionService):
        self.session = session
        self.account_repo = AccountRepository(session)
        self.hasher = hasher
        self.sessions = sessions

    async def register(self, request: RegisterRequest) -> AccountResponse:
        """Register new account."""
        if await self.account_repo.is_email_taken(request.email):
            raise ConflictError()

        password_hash = self.hasher.hash(request.password)
        try:
            account = await self.account_repo.create_account(request.email, password_hash)
        except IntegrityError as e:
            # registered concurrently between the check and the insert
            await self.session.rollback()
            raise ConflictError() from e

        logger.info(f"Registered account {account.id}")
        return AccountResponse.model_validate(account)

    async def authenticate(self, email: str, password: str) -> UUID:
        """Check credentials. Unknown email and wrong password fail the same way."""
        account = await self.account_repo.get_by_email(email)
        if account is None or not self.hasher.verify(password, account.password_hash):
            logger.warning("Failed login attempt")
            raise InvalidCredentialsError()
        return account.id

    async def login(self, request: LoginRequest) -> TokenResponse:
        """Login and return a JWT access token."""
        account_id = await self.authenticate(request.email, request.password)
        return TokenResponse(
            access_token=self.sessions.issue(account_id),
            token_type="bearer",
            expires_in=self.sessions.ttl_seconds,
        )

    async def get_account(self, account_id: UUID) -> AccountResponse:
        """Get account by ID."""
        account = await self.account_repo.get_by_id(account_id)
        if not account:
            raise NotFoundError("Account not found")
        return AccountResponse.model_validate(account)
