"""
Services.

Business logic layer.
"""

from app.services.auth_service import AuthService
from app.services.base_service import BaseService, log_operation
from app.services.eligibility_service import EligibilityService, MemberStanding
from app.services.network import AncestorLink, NetworkStore
from app.services.session import (
    DashboardDataSource,
    DashboardSession,
    FetchResult,
    ReadThroughCache,
    RetryPolicy,
    SessionState,
    open_dashboard_session,
    with_cache_fallback,
)
from app.services.shop_service import ShopService
from app.services.tree_presenter import TreeExpansionState, TreePresenter
from app.services.volume import VolumeAggregator
from app.services.wallet_service import WalletService


__all__ = [
    # Base
    "BaseService",
    "log_operation",
    # Referral network core
    "AncestorLink",
    "NetworkStore",
    "VolumeAggregator",
    "EligibilityService",
    "MemberStanding",
    "TreeExpansionState",
    "TreePresenter",
    # Member services
    "AuthService",
    "ShopService",
    "WalletService",
    # Dashboard session
    "DashboardDataSource",
    "DashboardSession",
    "FetchResult",
    "ReadThroughCache",
    "RetryPolicy",
    "SessionState",
    "open_dashboard_session",
    "with_cache_fallback",
]
