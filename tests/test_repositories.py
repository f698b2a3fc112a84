"""Repository error translation tests.

Sessions are mocks yielded by a fake session factory, so these check that
store failures surface as PersistenceError and that malformed ids never
reach the database.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.app.bots.repository import BotRepository
from src.app.content.repository import ContentRepository
from src.app.core.database import persistence_errors
from src.app.core.exceptions import PersistenceError
from src.app.users.repository import UserRepository


def _factory(session):
    async def session_factory():
        yield session

    return session_factory


@pytest.fixture
def failing_session():
    session = MagicMock()
    session.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("db down")))
    session.commit = AsyncMock()
    session.refresh = AsyncMock()
    return session


async def test_persistence_errors_translates_sqlalchemy():
    with pytest.raises(PersistenceError, match="content.create"):
        async with persistence_errors("content.create"):
            raise OperationalError("INSERT", {}, Exception("db down"))


async def test_persistence_errors_passes_other_exceptions():
    with pytest.raises(KeyError):
        async with persistence_errors("content.create"):
            raise KeyError("x")


async def test_content_read_failure(failing_session):
    repository = ContentRepository(session_factory=_factory(failing_session))

    with pytest.raises(PersistenceError):
        await repository.get_content("6f1c2a8e-3d4b-4c5a-9e7f-0a1b2c3d4e5f")


async def test_content_malformed_id_skips_database(failing_session):
    repository = ContentRepository(session_factory=_factory(failing_session))

    assert await repository.get_content("not-a-uuid") is None
    assert await repository.increment_views("not-a-uuid") is None
    failing_session.execute.assert_not_awaited()


async def test_bot_delete_failure(failing_session):
    repository = BotRepository(session_factory=_factory(failing_session))

    with pytest.raises(PersistenceError, match="bot.delete"):
        await repository.delete_bot("bot-1")


async def test_user_lookup_failure(failing_session, user_id):
    repository = UserRepository(session_factory=_factory(failing_session))

    with pytest.raises(PersistenceError, match="user.get"):
        await repository.get_user(user_id)
