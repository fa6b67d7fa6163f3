from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from magicauth.core.core import Service
from magicauth.core.modules.user.models import Team, User, UserUpdate
from magicauth.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Manages user records."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1)], unique=True)

    async def get_user(self, user_id: UUID) -> User:
        """Get user by ID."""
        user = await self.find_user(user_id)
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return user

    async def find_user(self, user_id: UUID) -> User | None:
        user = await self._collection.find_one({"_id": user_id})
        return None if user is None else User.model_validate(user)

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by exact email address, or None."""
        user = await self._collection.find_one({"email": email})
        return None if user is None else User.model_validate(user)

    async def create_user(self, email: str, first_name: str, team: Team) -> User:
        if await self.get_user_by_email(email) is not None:
            raise ValidationError(f"User '{email}' already exists")

        timestamp = self.now()
        user = User(email=email, first_name=first_name, team=team, created_at=timestamp, updated_at=timestamp)
        await self._collection.insert_one(user.to_mongo())
        logger.debug("user_created", user_id=str(user.id))
        return user

    async def update_user(self, user_id: UUID, update: UserUpdate) -> User:
        """Apply the set, non-null fields of `update`; id, email, team and timestamps are not updatable."""
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        changes["updated_at"] = self.now()
        result = await self._collection.update_one({"_id": user_id}, {"$set": changes})
        if result.matched_count == 0:
            raise NotFoundError(f"User '{user_id}' not found")
        return await self.get_user(user_id)
