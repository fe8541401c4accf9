"""
Member repository.

Data access layer for Member model.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.member import Member
from app.repositories.base import BaseRepository


class MemberRepository(BaseRepository[Member]):
    """Member repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize member repository."""
        super().__init__(Member, session)

    async def get_by_email(self, email: str) -> Member | None:
        """
        Get member by login email (case-insensitive).

        Args:
            email: Email address

        Returns:
            Member or None
        """
        stmt = select(Member).where(func.lower(Member.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_referral_code(self, code: str) -> Member | None:
        """
        Get member by referral code.

        Args:
            code: Referral code (case-insensitive)

        Returns:
            Member or None
        """
        return await self.get_by(referral_code=code.strip().upper())

    async def referral_code_exists(self, code: str) -> bool:
        """Check if a referral code is taken."""
        return await self.exists(referral_code=code)

    async def get_names(self, member_ids: list[int]) -> dict[int, Member]:
        """
        Load several members in one query.

        Args:
            member_ids: Member IDs

        Returns:
            Dict mapping member id to Member
        """
        if not member_ids:
            return {}

        stmt = select(Member).where(Member.id.in_(member_ids))
        result = await self.session.execute(stmt)
        return {member.id: member for member in result.scalars().all()}
