from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from magicauth.core.db import MongoModel
from magicauth.utils import now


class Team(StrEnum):
    BLUE = "BLUE"
    RED = "RED"
    YELLOW = "YELLOW"


TEAMS: list[Team] = list(Team)


class Role(StrEnum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class User(MongoModel):
    """User account, identified by email address.

    Indexed on email - unique.
    """

    email: str
    first_name: str
    discord_id: str | None = None
    team: Team
    role: Role = Role.MEMBER
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class UserUpdate(BaseModel):
    """Fields a user record may change after creation. Unset or None fields are left untouched."""

    first_name: str | None = None
    discord_id: str | None = None
    role: Role | None = None
