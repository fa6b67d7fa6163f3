from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from magicauth.core.core import Service
from magicauth.core.modules.post_read.models import POST_READ_DEDUP_WINDOW, PostRead

logger = structlog.get_logger(__name__)


class PostReadService(Service):
    """Counts post reads, at most once per user and post within the dedup window."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("post_reads")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("user_id", 1), ("post_slug", 1), ("created_at", -1)])

    async def add_post_read(self, slug: str, user_id: UUID) -> PostRead | None:
        """Record a read, or return None if this user already read this post within the window.

        Check and insert are separate operations; two concurrent calls may both insert.
        """
        timestamp = self.now()
        read_in_window = await self._collection.find_one(
            {"user_id": user_id, "post_slug": slug, "created_at": {"$gt": timestamp - POST_READ_DEDUP_WINDOW}},
            projection={"_id": 1},
        )
        if read_in_window is not None:
            logger.debug("post_read_duplicate", user_id=str(user_id), post_slug=slug)
            return None

        post_read = PostRead(user_id=user_id, post_slug=slug, created_at=timestamp)
        await self._collection.insert_one(post_read.to_mongo())
        return post_read
