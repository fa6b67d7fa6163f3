from datetime import datetime, timedelta
from uuid import UUID

from magicauth.core.db import MongoModel

POST_READ_DEDUP_WINDOW = timedelta(days=7)


class PostRead(MongoModel):
    """Record that a user read a post.

    Indexed on (user_id, post_slug, created_at).
    """

    user_id: UUID
    post_slug: str
    created_at: datetime
