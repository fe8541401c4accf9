"""
Network store package.

Placement edges of the binary tree and the cached subtree aggregates.
"""

from app.services.network.store import AncestorLink, NetworkStore


__all__ = [
    "AncestorLink",
    "NetworkStore",
]
