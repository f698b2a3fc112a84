"""User repository -- lookup and provisioning of the default user."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator, Callable

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.database import persistence_errors
from src.app.users.models import UserModel
from src.app.users.schemas import User, UserRole

logger = structlog.get_logger(__name__)


def _model_to_user(model: UserModel) -> User:
    return User(
        id=str(model.id),
        email=model.email,
        name=model.name,
        role=UserRole(model.role),
        created_at=model.created_at,
    )


class UserRepository:
    """Async access to users.

    Args:
        session_factory: Async callable that yields AsyncSession instances.
    """

    def __init__(
        self, session_factory: Callable[..., AsyncGenerator[AsyncSession, None]]
    ) -> None:
        self._session_factory = session_factory

    async def get_user(self, user_id: str) -> User | None:
        async for session in self._session_factory():
            async with persistence_errors("user.get"):
                result = await session.execute(
                    select(UserModel).where(UserModel.id == uuid.UUID(user_id))
                )
                model = result.scalar_one_or_none()
            return _model_to_user(model) if model else None

    async def ensure_user(self, user_id: str, email: str, name: str | None = None) -> User:
        """Return the user, creating it on first use.

        Args:
            user_id: User UUID string.
            email: Email used when the user has to be created.
            name: Display name used when the user has to be created.

        Returns:
            Existing or newly created User.
        """
        async for session in self._session_factory():
            async with persistence_errors("user.ensure"):
                result = await session.execute(
                    select(UserModel).where(UserModel.id == uuid.UUID(user_id))
                )
                model = result.scalar_one_or_none()
                if model is None:
                    model = UserModel(
                        id=uuid.UUID(user_id),
                        email=email,
                        name=name,
                        role=UserRole.USER.value,
                    )
                    session.add(model)
                    await session.commit()
                    await session.refresh(model)
                    logger.info("user.provisioned", user_id=user_id, email=email)
            return _model_to_user(model)
