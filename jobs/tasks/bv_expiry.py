"""
BV expiry task.

Withdraws business volume credits older than BV_EXPIRY_MONTHS from the
subtree totals of their ancestors. Meant to be enqueued daily.
"""

from datetime import datetime

import dramatiq
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.services.volume import VolumeAggregator
from app.utils.datetime_utils import utc_now
from jobs.async_runner import run_async
from jobs.broker import broker  # noqa: F401  (registers the Redis broker)


DEFAULT_BATCH_SIZE = 500
MAX_BATCHES = 200


async def run_expiry_sweep(
    session_maker: async_sessionmaker[AsyncSession],
    batch_size: int = DEFAULT_BATCH_SIZE,
    now: datetime | None = None,
) -> int:
    """
    Sweep due ledger entries batch by batch, one transaction per batch.

    Args:
        session_maker: Session factory
        batch_size: Entries per transaction
        now: Reference time (defaults to now)

    Returns:
        Total entries swept; entries with a corrupt placement chain are
        flagged and not counted
    """
    now = now or utc_now()
    total = 0

    for _ in range(MAX_BATCHES):
        async with session_maker() as session:
            result = await VolumeAggregator(session).expire_due_entries(
                now=now, limit=batch_size
            )
            await session.commit()

        total += result.swept
        if result.processed < batch_size:
            break
    else:
        logger.warning(f"BV expiry sweep stopped after {MAX_BATCHES} batches")

    return total


@dramatiq.actor(max_retries=3, time_limit=600_000)  # 10 min timeout
def expire_business_volume(batch_size: int = DEFAULT_BATCH_SIZE) -> None:
    """Withdraw expired BV credits from the network totals."""
    from app.config.database import task_session_maker

    logger.info("Starting BV expiry sweep...")

    try:
        swept = run_async(run_expiry_sweep(task_session_maker, batch_size=batch_size))
    except Exception as e:
        logger.exception(f"BV expiry sweep failed: {e}")
        raise

    logger.info(f"BV expiry sweep complete: {swept} entries expired")
