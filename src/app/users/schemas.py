"""Pydantic schemas for users."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"


class User(BaseModel):
    """Record owner."""

    id: str
    email: str
    name: str | None = None
    role: UserRole = UserRole.USER
    created_at: datetime | None = None
