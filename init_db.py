"""Initialize database tables and, with --seed, the demo contest data"""
import asyncio
import sys

from quilo_backend.database import engine, Base, AsyncSessionLocal
from quilo_backend.models import *  # noqa: F401,F403 - Import all models to register them
from quilo_backend.seed import seed_demo_data


async def init(seed: bool = False):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("Database tables created successfully.")

    if seed:
        async with AsyncSessionLocal() as session:
            seeded = await seed_demo_data(session)
        print("Demo data inserted." if seeded else "Database not empty, demo data skipped.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init(seed="--seed" in sys.argv))
