"""Seed script — creates the admin account and a few sample tours."""

import asyncio
import logging
from datetime import date
from decimal import Decimal

from passlib.context import CryptContext
from sqlalchemy import select

from tourdesk.config import settings
from tourdesk.database import async_session_factory, create_tables
from tourdesk.models.tour import Tour
from tourdesk.models.user import User

logger = logging.getLogger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# ── Sample tours ───────────────────────────────────────────────────────────────

TOURS = [
    {
        "title": "Грузия: горы и вино",
        "short_description": "Казбеги, Сигнахи и дегустации в Кахетии",
        "price": Decimal("1250"),
        "duration": 8,
        "location": "Грузия",
        "date_start": date(2025, 5, 1),
        "date_end": date(2025, 5, 8),
        "max_participants": 12,
        "image_url": "assets/images/tours/georgia.jpg",
        "programs": [
            {"day": 1, "title": "Тбилиси", "description": "Встреча, прогулка по старому городу"},
            {"day": 2, "title": "Казбеги", "description": "Военно-Грузинская дорога"},
        ],
    },
    {
        "title": "Армения за выходные",
        "short_description": "Ереван, Гарни и Гегард",
        "price": Decimal("640"),
        "duration": 3,
        "location": "Армения",
        "date_start": date(2025, 6, 13),
        "date_end": date(2025, 6, 15),
        "max_participants": 16,
    },
]


async def seed_admin() -> bool:
    """Create the admin account when the users table is empty."""
    async with async_session_factory() as db:
        result = await db.execute(select(User).limit(1))
        if result.scalar_one_or_none():
            return False

        db.add(User(
            email=settings.admin_email,
            password_hash=pwd_context.hash(settings.admin_password),
            name="Admin",
            role="admin",
        ))
        await db.commit()
        logger.info(f"Seeded admin user {settings.admin_email}")
        return True


async def seed():
    await create_tables()
    await seed_admin()

    async with async_session_factory() as db:
        result = await db.execute(select(Tour).limit(1))
        if result.scalar_one_or_none():
            print("Tours already seeded. Skipping.")
            return

        for data in TOURS:
            db.add(Tour(status="active", **data))
        await db.commit()
        print(f"Seeded {len(TOURS)} tours.")


if __name__ == "__main__":
    asyncio.run(seed())
