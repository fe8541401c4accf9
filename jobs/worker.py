"""
Worker entry point.

Run with ``dramatiq jobs.worker``. Configures logging, then imports the
actor modules so the broker knows about them.
"""

from app.config.logging import setup_logging


setup_logging()

from jobs.tasks.bv_expiry import expire_business_volume  # noqa: E402


__all__ = ["expire_business_volume"]
