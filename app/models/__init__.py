"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.base import Base
from app.models.bv_ledger import BVLedgerEntry
from app.models.enums import (
    KycStatus,
    OrderStatus,
    PlacementSide,
    SpilloverPolicy,
    TransactionStatus,
    TransactionType,
)
from app.models.member import Member
from app.models.order import Order
from app.models.product import Product
from app.models.referral_level_unlock import ReferralLevelUnlock
from app.models.team_structure import TeamStructure
from app.models.transaction import Transaction
from app.models.wallet import Wallet


__all__ = [
    "Base",
    # Network
    "Member",
    "TeamStructure",
    "BVLedgerEntry",
    "ReferralLevelUnlock",
    # Wallet and shop
    "Wallet",
    "Transaction",
    "Product",
    "Order",
    # Enums
    "KycStatus",
    "OrderStatus",
    "PlacementSide",
    "SpilloverPolicy",
    "TransactionStatus",
    "TransactionType",
]
