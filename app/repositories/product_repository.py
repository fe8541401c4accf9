"""
Product repository.

Data access layer for Product model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.product import Product
from app.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    """Product repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize product repository."""
        super().__init__(Product, session)

    async def get_active(self) -> list[Product]:
        """Get products available in the shop."""
        return await self.find_by(order_by=Product.id, is_active=True)
