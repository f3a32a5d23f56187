"""Account repository for database operations."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.account import Account


class AccountRepository:
    """Repository for account database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_account(self, email: str, password_hash: str) -> Account:
        """Create new account. Raises IntegrityError if the email is taken."""
        account = Account(email=email.lower(), password_hash=password_hash)
        self.session.add(account)
        await self.session.commit()
        return account

    async def get_by_id(self, account_id: UUID) -> Optional[Account]:
        """Get account by ID."""
        stmt = select(Account).where(Account.id == account_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[Account]:
        """Get account by email, case-insensitively."""
        stmt = select(Account).where(Account.email == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def is_email_taken(self, email: str) -> bool:
        """Check if email is registered."""
        return await self.get_by_email(email) is not None
