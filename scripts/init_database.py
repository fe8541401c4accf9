#!/usr/bin/env python3
"""Create database tables and optionally seed a root member and products."""

import argparse
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger

from app.config.database import async_engine, async_session_maker
from app.models import Base, Product
from app.services.auth_service import AuthService

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")


DEMO_PRODUCTS = [
    {"name": "Herbal Wellness Kit", "base_price": Decimal("1500"), "gst": Decimal("270"), "bv_credit": 1000, "stock": 100},
    {"name": "Daily Nutrition Pack", "base_price": Decimal("800"), "gst": Decimal("144"), "bv_credit": 500, "stock": 250},
]


async def init_database(root_email: str | None, root_password: str | None, seed_products: bool) -> None:
    """Create all tables (checkfirst) and seed optional data."""
    logger.info("Creating tables (checkfirst=True)...")
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)

    if root_email and root_password:
        async with async_session_maker() as session:
            profile = await AuthService(session).sign_up(
                email=root_email,
                password=root_password,
                name="Network Root",
                mobile="9000000000",
            )
        logger.info(
            f"Root member {profile.member_code} created, referral code {profile.referral_code}"
        )

    if seed_products:
        async with async_session_maker() as session:
            session.add_all(Product(**data) for data in DEMO_PRODUCTS)
            await session.commit()
        logger.info(f"Seeded {len(DEMO_PRODUCTS)} products")

    await async_engine.dispose()
    logger.success("Database initialized successfully!")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--root-email", help="Create a root member with this email")
    parser.add_argument("--root-password", help="Password of the root member")
    parser.add_argument("--seed-products", action="store_true", help="Add demo products")
    args = parser.parse_args()

    asyncio.run(init_database(args.root_email, args.root_password, args.seed_products))


if __name__ == "__main__":
    main()
