"""
Volume aggregator package.

Business volume credits, their propagation up the placement tree and
their expiry.
"""

from app.services.volume.aggregator import ExpirySweepResult, VolumeAggregator


__all__ = ["ExpirySweepResult", "VolumeAggregator"]
