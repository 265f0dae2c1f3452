"""Report row counts and user/settings pairing problems.

Every user must have exactly one user_settings row; anything else means a
registration was only partly written.
"""

import asyncio
import sys

from sqlalchemy import func, select

from app.core.config import get_settings
from app.db.session import build_engine, build_session_maker
from app.models import User, UserSettings


async def check_data() -> int:
    engine = build_engine(get_settings())
    session_maker = build_session_maker(engine)
    problems = 0
    try:
        async with session_maker() as session:
            for model in (User, UserSettings):
                count = (await session.execute(select(func.count()).select_from(model))).scalar()
                print(f"Table '{model.__tablename__}' row count: {count}")

            missing = await session.execute(
                select(User.id, User.username)
                .outerjoin(UserSettings, UserSettings.user_id == User.id)
                .where(UserSettings.user_id.is_(None))
            )
            for user_id, username in missing.all():
                problems += 1
                print(f"  User {user_id} ({username}) has no settings row")

            orphans = await session.execute(
                select(UserSettings.user_id)
                .outerjoin(User, User.id == UserSettings.user_id)
                .where(User.id.is_(None))
            )
            for (user_id,) in orphans.all():
                problems += 1
                print(f"  Orphan settings row for missing user {user_id}")
    finally:
        await engine.dispose()

    print("OK" if problems == 0 else f"{problems} problem(s) found")
    return problems


if __name__ == "__main__":
    sys.exit(1 if asyncio.run(check_data()) else 0)
