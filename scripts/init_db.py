"""Script to create every table directly, bypassing migrations."""

import asyncio

from healx.config import settings
from healx.database import Database
from healx.models import metadata


async def init_db() -> None:
    """Initialize the database by creating all tables."""
    database = Database.from_settings(settings)
    try:
        async with database.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        print(f"✓ Created {len(metadata.tables)} tables")
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(init_db())
