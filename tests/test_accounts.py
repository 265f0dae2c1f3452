from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import OutcomeKind, Theme
from app.core.security import PasswordHasher
from app.core.tokens import TokenCodec
from app.models import User, UserSettings
from app.services.accounts import AccountService


async def _register(session_maker, codec, hasher, email, username, password="pass123"):
    async with session_maker() as session:
        outcome = await AccountService(session, codec, hasher).register(email, username, password)
        await session.commit()
        return outcome


async def _count(session_maker, model) -> int:
    async with session_maker() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_register_creates_user_settings_and_token(session_maker, codec: TokenCodec, hasher: PasswordHasher):
    outcome = await _register(session_maker, codec, hasher, "a@x.com", "alice")

    assert outcome.kind is OutcomeKind.OK
    result = outcome.data
    assert result.user.email == "a@x.com"
    assert result.user.username == "alice"
    assert "password_hash" not in result.model_dump()["user"]

    claims = codec.verify(result.token)
    assert (claims.user_id, claims.email, claims.username) == (result.user.id, "a@x.com", "alice")

    async with session_maker() as session:
        user = await session.get(User, result.user.id)
        assert user.password_hash != "pass123"
        assert hasher.verify("pass123", user.password_hash)
        settings = await session.get(UserSettings, user.id)
        assert settings.theme is Theme.LIGHT
        assert settings.currency == "USD"
        assert settings.notifications_enabled is False
        assert settings.email_alerts is False


@pytest.mark.asyncio
async def test_register_normalizes_email(session_maker, codec, hasher):
    outcome = await _register(session_maker, codec, hasher, "  Alice@X.COM ", "alice")
    assert outcome.data.user.email == "alice@x.com"


@pytest.mark.asyncio
async def test_duplicate_email_conflicts_without_orphan_settings(session_maker, codec, hasher):
    assert (await _register(session_maker, codec, hasher, "a@x.com", "alice")).ok
    second = await _register(session_maker, codec, hasher, "a@x.com", "bob", "pass456")

    assert second.kind is OutcomeKind.CONFLICT
    assert second.data is None
    assert await _count(session_maker, User) == 1
    assert await _count(session_maker, UserSettings) == 1


@pytest.mark.asyncio
async def test_duplicate_username_conflicts(session_maker, codec, hasher):
    assert (await _register(session_maker, codec, hasher, "a@x.com", "alice")).ok
    second = await _register(session_maker, codec, hasher, "other@x.com", "alice")
    assert second.kind is OutcomeKind.CONFLICT


@pytest.mark.asyncio
async def test_unique_constraint_catches_race_past_precheck(
    session_maker, codec, hasher, monkeypatch: pytest.MonkeyPatch
):
    assert (await _register(session_maker, codec, hasher, "a@x.com", "alice")).ok

    async def nothing_found(self, email, username):
        return None

    # Simulate a concurrent registration that committed after our pre-check ran
    monkeypatch.setattr(AccountService, "_find_existing", nothing_found)
    outcome = await _register(session_maker, codec, hasher, "a@x.com", "alice2")

    assert outcome.kind is OutcomeKind.CONFLICT
    assert await _count(session_maker, User) == 1
    assert await _count(session_maker, UserSettings) == 1


@pytest.mark.asyncio
async def test_register_commits_before_returning_token(session_maker, codec, hasher):
    async with session_maker() as session:
        outcome = await AccountService(session, codec, hasher).register("a@x.com", "alice", "pass123")
    # Session closed without a caller commit; the account must already be durable
    assert outcome.ok
    assert await _count(session_maker, User) == 1
    assert await _count(session_maker, UserSettings) == 1


@pytest.mark.asyncio
async def test_settings_insert_failure_leaves_no_user(session_maker, codec, hasher, monkeypatch):
    original_flush = AsyncSession.flush
    calls: list[int] = []

    async def flaky_flush(self, objects=None):
        calls.append(1)
        if len(calls) == 2:
            raise OperationalError("INSERT INTO user_settings", {}, Exception("disk I/O error"))
        await original_flush(self, objects)

    monkeypatch.setattr(AsyncSession, "flush", flaky_flush)
    async with session_maker() as session:
        with pytest.raises(OperationalError):
            await AccountService(session, codec, hasher).register("a@x.com", "alice", "pass123")
    monkeypatch.undo()

    assert await _count(session_maker, User) == 0
    assert await _count(session_maker, UserSettings) == 0


@pytest.mark.asyncio
async def test_login_succeeds_with_correct_password(session_maker, codec, hasher):
    registered = await _register(session_maker, codec, hasher, "a@x.com", "alice")
    async with session_maker() as session:
        outcome = await AccountService(session, codec, hasher).login("A@x.com", "pass123")

    assert outcome.kind is OutcomeKind.OK
    assert outcome.data.user == registered.data.user
    assert codec.verify(outcome.data.token).user_id == registered.data.user.id


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_email_are_indistinguishable(session_maker, codec, hasher):
    await _register(session_maker, codec, hasher, "a@x.com", "alice")
    async with session_maker() as session:
        service = AccountService(session, codec, hasher)
        wrong_password = await service.login("a@x.com", "wrongpw1")
        unknown_email = await service.login("nobody@x.com", "pass123")

    assert wrong_password == unknown_email
    assert wrong_password.kind is OutcomeKind.INVALID_CREDENTIALS
    assert wrong_password.data is None


@pytest.mark.asyncio
async def test_get_profile(session_maker, codec, hasher):
    registered = await _register(session_maker, codec, hasher, "a@x.com", "alice")
    async with session_maker() as session:
        service = AccountService(session, codec, hasher)
        found = await service.get_profile(registered.data.user.id)
        missing = await service.get_profile(registered.data.user.id + 100)

    assert found.kind is OutcomeKind.OK
    assert found.data.username == "alice"
    assert found.data.created_at is not None
    assert "password_hash" not in found.data.model_dump()
    assert missing.kind is OutcomeKind.NOT_FOUND
