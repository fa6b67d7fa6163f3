from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from magicauth.config import Config
from magicauth.utils import Clock, now, truncate_to_millis

if TYPE_CHECKING:
    from magicauth.core.modules.magic_link.encryption import Encryptor
    from magicauth.core.modules.magic_link.service import MagicLinkService
    from magicauth.core.modules.post_read.service import PostReadService
    from magicauth.core.modules.session.service import SessionService
    from magicauth.core.modules.user.service import UserService


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core

    def now(self) -> datetime:
        """Current time from the core clock, truncated to what the store can hold."""
        return truncate_to_millis(self.core.clock())


class Services:
    """Service registry that automatically discovers and initializes services."""

    user: UserService
    session: SessionService
    magic_link: MagicLinkService
    post_read: PostReadService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters for initialization - user must be first
        service_configs = [
            ("user", "magicauth.core.modules.user.service", "UserService"),
            ("session", "magicauth.core.modules.session.service", "SessionService"),
            ("magic_link", "magicauth.core.modules.magic_link.service", "MagicLinkService"),
            ("post_read", "magicauth.core.modules.post_read.service", "PostReadService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, database, clock, encryptor and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    clock: Clock
    encryptor: Encryptor
    services: Services

    def __init__(
        self,
        config: Config,
        mongo_client: AsyncMongoClient[dict[str, Any]],
        encryptor: Encryptor,
        clock: Clock = now,
    ) -> None:
        """Initialize core around an already constructed MongoDB client."""
        self.config = config
        self.mongo_client = mongo_client
        self.database = mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.clock = clock
        self.encryptor = encryptor
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Start all services on application startup."""
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        await self.mongo_client.aclose()
