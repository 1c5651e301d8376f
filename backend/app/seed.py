"""
Tourlist Backend - Default Category Seed
=========================================

What:  Inserts the default attraction categories when they are missing.
How:   Existing categories (matched by exact name) are left untouched, so the
       script is safe to run on every deploy.
Usage: python -m app.seed
"""

import asyncio
import logging
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, settings as default_settings
from app.database import Database
from app.models import AttractionCategory

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: List[Dict[str, str]] = [
    {
        "name": "Historic",
        "description": "Historical sites, monuments, and heritage locations",
        "color": "#8B4513",
    },
    {
        "name": "Natural",
        "description": "Natural landscapes, parks, and scenic areas",
        "color": "#228B22",
    },
    {
        "name": "Cultural",
        "description": "Cultural centers, museums, and traditional sites",
        "color": "#9932CC",
    },
    {
        "name": "Adventure",
        "description": "Adventure activities and outdoor experiences",
        "color": "#FF4500",
    },
    {
        "name": "Beach",
        "description": "Beach destinations and coastal attractions",
        "color": "#00CED1",
    },
    {
        "name": "Wildlife",
        "description": "Wildlife reserves, sanctuaries, and nature parks",
        "color": "#8FBC8F",
    },
]


async def seed_categories(session: AsyncSession) -> int:
    """
    Add every default category not already present.

    Returns:
        Number of categories created
    """
    result = await session.execute(select(AttractionCategory.name))
    existing = set(result.scalars().all())

    created = 0
    for category in DEFAULT_CATEGORIES:
        if category["name"] in existing:
            logger.info("Category exists: %s", category["name"])
            continue
        session.add(AttractionCategory(**category))
        created += 1
        logger.info("Category created: %s", category["name"])

    await session.flush()
    return created


async def main(settings: Optional[Settings] = None) -> None:
    database = Database(settings or default_settings)
    try:
        async with database.session_factory() as session:
            async with session.begin():
                created = await seed_categories(session)
        logger.info("Attraction categories seeded (%d new)", created)
    finally:
        await database.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    asyncio.run(main())
