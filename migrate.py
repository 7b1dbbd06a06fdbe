#!/usr/bin/env python3
"""
Database management script.
Creates, resets, and seeds the marketplace schema.
"""

import asyncio
import argparse
import logging
import sys
from decimal import Decimal

from sqlalchemy import select

from marketplace.config import settings
from marketplace.database import AsyncSessionLocal, close_db_connection, create_tables, drop_tables
from marketplace.models.user import User, UserRole
from marketplace.models.property import PropertyStatus, PropertyType
from marketplace.repositories.message import MessageRepository
from marketplace.repositories.property import PropertyRepository
from marketplace.repositories.user import UserRepository

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SEED_PASSWORD = "secret1"

SEED_USERS = [
    {"name": "Jo Seller", "email": "jo@example.com", "role": UserRole.SELLER},
    {"name": "Ann Buyer", "email": "ann@example.com", "role": UserRole.BUYER},
    {"name": "Bo Broker", "email": "bo@example.com", "role": UserRole.BROKER},
]


def _listing(title: str, property_type: PropertyType, price: str, city: str, bedrooms=None) -> dict:
    return {
        "title": title,
        "description": f"{title}, listed for the local demo data set.",
        "property_type": property_type,
        "price": Decimal(price),
        "bedrooms": bedrooms,
        "address": "1 Market Street",
        "city": city,
        "state": "CA",
        "country": "US",
        "zip_code": "90001",
    }


async def seed_database() -> None:
    """Seed the database with demo users, listings, and a thread."""
    logger.info("Seeding database with demo data")

    async with AsyncSessionLocal() as session:
        existing = await session.execute(select(User).where(User.email == SEED_USERS[0]["email"]))
        if existing.scalar_one_or_none():
            logger.info("Seed users already exist, skipping seed")
            return

        user_repo = UserRepository(session)
        property_repo = PropertyRepository(session)
        message_repo = MessageRepository(session)

        users = {}
        for user_data in SEED_USERS:
            user = await user_repo.create_user({**user_data, "password": SEED_PASSWORD})
            users[user.role] = user

        seller = users[UserRole.SELLER]
        buyer = users[UserRole.BUYER]

        house = await property_repo.create_property(
            {**_listing("Lakeview House", PropertyType.HOUSE, "250000", "Lakeview", bedrooms=3), "user_id": seller.id}
        )
        await property_repo.create_property(
            {**_listing("Downtown Apartment", PropertyType.APARTMENT, "180000", "Springfield", bedrooms=2), "user_id": seller.id}
        )
        sold = await property_repo.create_property(
            {**_listing("Corner Plot", PropertyType.PLOT, "90000", "Lakeview"), "user_id": users[UserRole.BROKER].id}
        )
        await property_repo.update_status(sold.id, PropertyStatus.SOLD)

        await message_repo.create_message(house.id, buyer.id, "Is this still available?")
        await message_repo.create_message(house.id, seller.id, "Yes, viewings on weekends.")

    logger.info("Database seeded successfully")
    logger.info(f"Demo accounts: {', '.join(u['email'] for u in SEED_USERS)} (password: {SEED_PASSWORD})")


async def reset_database() -> None:
    """Drop and recreate all tables, then seed."""
    logger.warning("Resetting database - all data will be lost!")
    await drop_tables()
    await create_tables()
    await seed_database()
    logger.info("Database reset completed")


async def _run(command) -> None:
    try:
        await command()
    finally:
        await close_db_connection()


def main():
    """Main CLI interface for database management."""
    parser = argparse.ArgumentParser(description="Property Marketplace database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create all tables")
    subparsers.add_parser("seed", help="Seed database with demo data")

    reset_parser = subparsers.add_parser("reset", help="Reset database (development only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    logger.info(f"Environment: {settings.environment}")

    try:
        if args.command == "create":
            asyncio.run(_run(create_tables))

        elif args.command == "seed":
            asyncio.run(_run(seed_database))

        elif args.command == "reset":
            if not args.confirm:
                print("Database reset requires --confirm flag")
                return
            asyncio.run(_run(reset_database))

    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
