from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from pymongo import AsyncMongoClient

from magicauth.config import Config
from magicauth.core.core import Core
from magicauth.core.modules.magic_link.encryption import Encryptor, FernetEncryptor
from magicauth.core.modules.post_read.models import PostRead
from magicauth.core.modules.session.models import Session
from magicauth.core.modules.user.models import Team, User, UserUpdate
from magicauth.utils import Clock, now


class App:
    """Facade for request handlers; all errors raised are magicauth.errors.UserError subclasses."""

    def __init__(
        self,
        config: Config,
        mongo_client: AsyncMongoClient[dict[str, Any]],
        clock: Clock = now,
        encryptor: Encryptor | None = None,
    ) -> None:
        if encryptor is None:
            encryptor = FernetEncryptor(config.magic_link_secret)
        self._core = Core(config, mongo_client, encryptor, clock)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Magic links ===
    def get_magic_link(self, email_address: str, domain_url: str) -> str:
        """Build a login link for the address, valid for 30 minutes."""
        return self._core.services.magic_link.get_magic_link(email_address, domain_url)

    def validate_magic_link(self, validation_email: str, link: str) -> None:
        """Validate a visited link against the email of the pending login."""
        self._core.services.magic_link.validate_magic_link(validation_email, link)

    # === Sessions ===
    async def create_session(self, user_id: UUID) -> Session:
        """Create a session valid for 30 days."""
        return await self._core.services.session.create_session(user_id)

    async def get_user_from_session_id(self, session_id: str) -> User:
        """Resolve a session id to its user."""
        return await self._core.services.session.get_user_from_session_id(session_id)

    # === Users ===
    async def get_user_by_email(self, email: str) -> User | None:
        return await self._core.services.user.get_user_by_email(email)

    async def create_user(self, email: str, first_name: str, team: Team) -> User:
        return await self._core.services.user.create_user(email, first_name, team)

    async def update_user(self, user_id: UUID, update: UserUpdate) -> User:
        return await self._core.services.user.update_user(user_id, update)

    # === Post reads ===
    async def add_post_read(self, slug: str, user_id: UUID) -> PostRead | None:
        """Count a read of a post, unless the user already read it in the last 7 days."""
        return await self._core.services.post_read.add_post_read(slug, user_id)
