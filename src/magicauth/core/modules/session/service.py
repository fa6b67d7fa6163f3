from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from magicauth.core.core import Service
from magicauth.core.modules.session.models import SESSION_EXPIRATION_TIME, Session
from magicauth.core.modules.user.models import User
from magicauth.errors import SessionExpiredError, SessionNotFoundError

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Service for managing user sessions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("user_id", 1)])

    async def create_session(self, user_id: UUID) -> Session:
        """Create a session for the user, expiring SESSION_EXPIRATION_TIME after creation.

        Sessions carry no metadata besides the owning user; id and timestamps are always assigned here.
        """
        created_at = self.now()
        session = Session(user_id=user_id, created_at=created_at, expiration_date=created_at + SESSION_EXPIRATION_TIME)
        await self._collection.insert_one(session.to_mongo())
        logger.debug("session_created", session_id=str(session.id), user_id=str(user_id))
        return session

    async def get_session(self, session_id: str) -> Session:
        try:
            session_uuid = UUID(session_id)
        except ValueError:
            raise SessionNotFoundError from None

        session = await self._collection.find_one({"_id": session_uuid})
        if session is None:
            raise SessionNotFoundError
        return Session.model_validate(session)

    async def get_user_from_session_id(self, session_id: str) -> User:
        """Resolve a session id to its user.

        Expired sessions are rejected but left in place.
        """
        session = await self.get_session(session_id)

        if self.core.clock() > session.expiration_date:
            logger.info("session_expired", session_id=session_id)
            raise SessionExpiredError

        user = await self.core.services.user.find_user(session.user_id)
        if user is None:
            raise SessionNotFoundError
        return user
