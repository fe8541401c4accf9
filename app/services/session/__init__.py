"""
Dashboard session package.

Retry policy, read-through cache, cache fallback and the session object
that ties them together.
"""

from app.services.session.cache import CacheHit, ReadThroughCache
from app.services.session.dashboard_session import (
    DashboardSession,
    SessionState,
    open_dashboard_session,
)
from app.services.session.data_source import DashboardDataSource
from app.services.session.fallback import FetchResult, with_cache_fallback
from app.services.session.retry import RetryPolicy


__all__ = [
    "CacheHit",
    "DashboardDataSource",
    "DashboardSession",
    "FetchResult",
    "ReadThroughCache",
    "RetryPolicy",
    "SessionState",
    "open_dashboard_session",
    "with_cache_fallback",
]
