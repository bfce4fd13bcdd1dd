"""Seed sample authors and community maps into the database."""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker

from guessr.core.config import settings
from guessr.models.map import Map
from guessr.models.user import User


DEFAULT_AUTHORS = ["alice", "bob"]

DEFAULT_MAPS = [
    {
        "author": "alice",
        "slug": "paris-streets",
        "name": "Paris Streets",
        "description_short": "Boulevards, bridges and back alleys of Paris.",
        "description_long": (
            "A tour of the French capital.\n"
            "Expect Haussmann facades, the Seine and plenty of cafés."
        ),
        "data": [
            {"lat": 48.8584, "lng": 2.2945},
            {"lat": 48.8606, "lng": 2.3376},
            {"lat": 48.8867, "lng": 2.3431},
        ],
        "plays": 12840,
        "hearts": 312,
    },
    {
        "author": "bob",
        "slug": "lonely-lighthouse",
        "name": "Lonely Lighthouse",
        "description_short": "One location. Good luck.",
        "description_long": "Every round drops you at the same lighthouse.",
        "data": [{"lat": 58.2167, "lng": -6.3885}],
        "plays": 97,
        "hearts": 4,
    },
    {
        "author": "bob",
        "slug": "coming-soon",
        "name": "Coming Soon",
        "description_short": "Locations are still being picked.",
        "description_long": "",
        "data": [],
        "plays": 0,
        "hearts": 0,
    },
]


async def seed_maps():
    """Seed sample authors and maps into the database."""
    engine = create_async_engine(settings.DATABASE_URL, echo=True)
    session_factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        authors = {}
        for username in DEFAULT_AUTHORS:
            result = await session.execute(select(User).where(User.username == username))
            user = result.scalar_one_or_none()

            if user is None:
                user = User(username=username)
                session.add(user)
                await session.flush()
                print(f"Created user: {username}")

            authors[username] = user

        for map_data in DEFAULT_MAPS:
            # Check if map exists
            stmt = select(Map).where(Map.slug == map_data["slug"])
            result = await session.execute(stmt)
            existing_map = result.scalar_one_or_none()

            if existing_map:
                print(f"Map '{map_data['name']}' already exists, skipping")
                continue

            fields = {key: value for key, value in map_data.items() if key != "author"}
            session.add(Map(created_by=authors[map_data["author"]].id, **fields))
            print(f"Created map: {map_data['name']}")

        await session.commit()
        print(f"\nSeeded {len(DEFAULT_MAPS)} maps successfully!")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_maps())
