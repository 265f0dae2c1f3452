from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.security import PasswordHasher
from app.core.tokens import TokenCodec
from app.db.base import Base
from app.db.session import build_engine, build_session_maker
from app.main import create_application

TEST_SECRET = "tests-secret-key-0123456789abcdef"


def _make_settings(tmp_path: Path, **overrides) -> Settings:
    values = dict(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'auth.sqlite3'}",
        database_create_all=True,
        database_connect_retries=1,
        jwt_secret=TEST_SECRET,
        password_bcrypt_rounds=4,
        environment="test",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture()
def make_settings(tmp_path: Path):
    """Build isolated settings (temp SQLite file, fast bcrypt) with overrides."""

    def factory(**overrides) -> Settings:
        return _make_settings(tmp_path, **overrides)

    return factory


@pytest.fixture()
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture()
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture()
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET)


@pytest.fixture()
def client(settings: Settings):
    with TestClient(create_application(settings)) as test_client:
        yield test_client


@pytest_asyncio.fixture()
async def session_maker(settings: Settings):
    engine = build_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield build_session_maker(engine)
    await engine.dispose()
