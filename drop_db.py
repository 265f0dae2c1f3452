"""Drop every table (and the alembic version marker). Destructive."""

import asyncio

from sqlalchemy import text

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import build_engine
from app.models import User, UserSettings  # noqa: F401 - register models on Base.metadata


async def drop_tables():
    engine = build_engine(get_settings())
    print("Dropping all tables...")
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE IF EXISTS alembic_version"))
        await conn.run_sync(Base.metadata.drop_all)
    print("Tables dropped.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(drop_tables())
