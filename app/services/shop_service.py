"""
Shop service.

Product purchases paid from the top-up balance. A purchase credits its
BV up the placement tree and pays referral commissions up the referrer
chain.
"""

from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import OrderStatus, TransactionStatus, TransactionType
from app.models.member import Member
from app.repositories.member_repository import MemberRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.referral_level_unlock_repository import (
    ReferralLevelUnlockRepository,
)
from app.repositories.transaction_repository import TransactionRepository
from app.repositories.wallet_repository import WalletRepository
from app.schemas.shop import OrderRecord, ProductRecord, PurchaseResult
from app.services.base_service import BaseService
from app.services.eligibility_service import EligibilityService
from app.services.network import NetworkStore
from app.services.volume import VolumeAggregator
from app.utils.db_decorators import with_auto_commit
from app.utils.exceptions import (
    CorruptTreeError,
    InsufficientBalanceError,
    MemberNotFoundError,
    OutOfStockError,
    ProductNotFoundError,
    ValidationFailedError,
)
from app.validators import validate_quantity
from compensation.constants import MAX_REFERRAL_DEPTH


MONEY_QUANT = Decimal("0.01")


class ShopService(BaseService):
    """Product catalogue and purchases."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize shop service."""
        super().__init__(session)
        self.product_repo = ProductRepository(session)
        self.order_repo = OrderRepository(session)
        self.wallet_repo = WalletRepository(session)
        self.transaction_repo = TransactionRepository(session)
        self.member_repo = MemberRepository(session)
        self.unlock_repo = ReferralLevelUnlockRepository(session)
        store = NetworkStore(session)
        self.volume = VolumeAggregator(session, network_store=store)
        self.eligibility = EligibilityService(session, network_store=store)

    async def list_products(self) -> list[ProductRecord]:
        """Active products, oldest first."""
        products = await self.product_repo.get_active()
        return [ProductRecord.model_validate(product) for product in products]

    @with_auto_commit
    async def purchase(
        self, member_id: int, product_id: int, quantity: int
    ) -> PurchaseResult:
        """
        Buy ``quantity`` units of a product.

        Total is ``(base_price + gst) * quantity`` taken from the top-up
        balance. The purchaser's BV grows by ``bv_credit * quantity`` and
        the same BV flows to its placement ancestors. Each referrer up to
        the deepest referral level receives that level's percentage of
        the total if the level is unlocked for them.

        Args:
            member_id: Buyer
            product_id: Product to buy
            quantity: Units

        Returns:
            PurchaseResult with the order and commissions by level

        Raises:
            ValidationFailedError: If quantity is not a positive integer
            ProductNotFoundError: If the product is missing or inactive
            OutOfStockError: If stock is below quantity
            MemberNotFoundError: If the buyer has no wallet
            InsufficientBalanceError: If the top-up balance is too low
        """
        is_valid, error = validate_quantity(quantity)
        if not is_valid:
            raise ValidationFailedError(error)

        product = await self.product_repo.get_by(for_update=True, id=product_id)
        if product is None or not product.is_active:
            raise ProductNotFoundError(product_id)
        if product.stock < quantity:
            raise OutOfStockError(
                f"Only {product.stock} units of {product.name} left, {quantity} requested"
            )

        buyer = await self.member_repo.get_by_id(member_id)
        wallet = await self.wallet_repo.get_by_member(member_id, for_update=True)
        if buyer is None or wallet is None:
            raise MemberNotFoundError(member_id, what="Wallet of member")

        unit_price = product.unit_price
        total = (unit_price * quantity).quantize(MONEY_QUANT)
        if wallet.topup_balance < total:
            raise InsufficientBalanceError(
                f"Top-up balance {wallet.topup_balance} is below order total {total}"
            )

        wallet.topup_balance -= total
        wallet.purchased_amount += total
        product.stock -= quantity
        bv_earned = product.bv_credit * quantity

        order = await self.order_repo.create(
            member_id=member_id,
            product_id=product.id,
            quantity=quantity,
            unit_price=unit_price,
            total_price=total,
            bv_earned=bv_earned,
            status=OrderStatus.COMPLETED.value,
        )
        reference = f"order:{order.id}"
        await self.transaction_repo.create(
            member_id=member_id,
            type=TransactionType.PURCHASE.value,
            amount=total,
            status=TransactionStatus.COMPLETED.value,
            description=f"{product.name} x{quantity}",
            reference_id=reference,
        )

        if bv_earned > 0:
            await self.volume.credit_bv(
                member_id,
                bv_earned,
                source_id=member_id,
                source="purchase",
                reference_id=reference,
            )

        commissions = await self._pay_commissions(buyer, total, reference)

        self.logger.info(
            "Purchase completed",
            extra={
                "member_id": member_id,
                "order_id": order.id,
                "total": str(total),
                "bv_earned": bv_earned,
                "commission_levels": sorted(commissions),
            },
        )
        return PurchaseResult(
            order=OrderRecord.model_validate(order), commissions=commissions
        )

    async def _pay_commissions(
        self, buyer: Member, total: Decimal, reference: str
    ) -> dict[int, Decimal]:
        paid: dict[int, Decimal] = {}
        max_level = min(self.eligibility.evaluator.max_level, MAX_REFERRAL_DEPTH)
        visited = {buyer.id}
        referrer_id = buyer.referrer_id

        for level in range(1, max_level + 1):
            if referrer_id is None:
                break
            if referrer_id in visited:
                raise CorruptTreeError(buyer.id, f"referrer cycle through member {referrer_id}")
            visited.add(referrer_id)

            referrer = await self.member_repo.get_by_id(referrer_id)
            if referrer is None:
                break
            referrer_id = referrer.referrer_id

            unlocked = await self.eligibility.refresh_referral_levels(referrer.id)
            if level not in unlocked:
                continue

            percent = self.eligibility.evaluator.commission_percent(level)
            amount = (total * percent / Decimal(100)).quantize(
                MONEY_QUANT, rounding=ROUND_HALF_UP
            )
            if amount <= 0:
                continue

            wallet = await self.wallet_repo.get_by_member(referrer.id, for_update=True)
            if wallet is None:
                continue
            wallet.main_balance += amount
            wallet.referral_bonus += amount

            await self.transaction_repo.create(
                member_id=referrer.id,
                type=TransactionType.REFERRAL_BONUS.value,
                amount=amount,
                status=TransactionStatus.COMPLETED.value,
                description=f"Level {level} commission",
                reference_id=reference,
            )
            await self.unlock_repo.add_earning(referrer.id, level, amount)
            paid[level] = amount

        return paid
