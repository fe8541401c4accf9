"""
Boundary DTOs.

Records read from the database are validated into these models before
any business logic uses them.
"""

from app.schemas.dashboard import DashboardSnapshot, UnlockedLevels
from app.schemas.member import MemberProfile, TransactionRecord, WalletSnapshot
from app.schemas.network import PlacementEdge, SubtreeAggregate, TreeViewNode
from app.schemas.shop import OrderRecord, ProductRecord, PurchaseResult
from app.schemas.volume import BVLedgerRecord


__all__ = [
    "BVLedgerRecord",
    "DashboardSnapshot",
    "MemberProfile",
    "OrderRecord",
    "PlacementEdge",
    "ProductRecord",
    "PurchaseResult",
    "SubtreeAggregate",
    "TransactionRecord",
    "TreeViewNode",
    "UnlockedLevels",
    "WalletSnapshot",
]
