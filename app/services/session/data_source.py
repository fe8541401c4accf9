"""
Dashboard data source.

Fetches the records the dashboard needs, each in its own short-lived
session so they can run concurrently.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.repositories.member_repository import MemberRepository
from app.repositories.referral_level_unlock_repository import (
    ReferralLevelUnlockRepository,
)
from app.repositories.wallet_repository import WalletRepository
from app.schemas.dashboard import UnlockedLevels
from app.schemas.member import MemberProfile, WalletSnapshot
from app.schemas.network import SubtreeAggregate
from app.services.network import NetworkStore
from app.utils.db_decorators import translate_db_errors
from app.utils.exceptions import MemberNotFoundError


class DashboardDataSource:
    """
    Typed fetches over the database.

    Connectivity failures surface as TransientIOError; missing records
    as NotFoundError subclasses.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker

    @translate_db_errors
    async def fetch_profile(self, member_id: int) -> MemberProfile:
        async with self.session_maker() as session:
            member = await MemberRepository(session).get_by_id(member_id)
            if member is None:
                raise MemberNotFoundError(member_id)
            return MemberProfile.model_validate(member)

    @translate_db_errors
    async def fetch_wallet(self, member_id: int) -> WalletSnapshot:
        async with self.session_maker() as session:
            wallet = await WalletRepository(session).get_by_member(member_id)
            if wallet is None:
                raise MemberNotFoundError(member_id, what="Wallet of member")
            return WalletSnapshot.model_validate(wallet)

    @translate_db_errors
    async def fetch_aggregate(self, member_id: int) -> SubtreeAggregate:
        async with self.session_maker() as session:
            return await NetworkStore(session).get_aggregate(member_id)

    @translate_db_errors
    async def fetch_unlocked_levels(self, member_id: int) -> UnlockedLevels:
        async with self.session_maker() as session:
            levels = await ReferralLevelUnlockRepository(session).get_unlocked_levels(
                member_id
            )
            return UnlockedLevels(member_id=member_id, levels=frozenset(levels))
