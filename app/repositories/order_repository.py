"""
Order repository.

Data access layer for Order model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.order import Order
from app.repositories.base import BaseRepository


class OrderRepository(BaseRepository[Order]):
    """Order repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize order repository."""
        super().__init__(Order, session)

    async def get_for_member(self, member_id: int, limit: int = 50) -> list[Order]:
        """Get member orders, newest first."""
        return await self.find_by(
            limit=limit,
            order_by=(Order.created_at.desc(), Order.id.desc()),
            member_id=member_id,
        )
