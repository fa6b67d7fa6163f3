"""Session management models."""

from datetime import datetime, timedelta
from uuid import UUID

from magicauth.core.db import MongoModel

SESSION_EXPIRATION_TIME = timedelta(days=30)


class Session(MongoModel):
    """Server-side login session.

    expiration_date is always created_at + SESSION_EXPIRATION_TIME and never changes.
    Indexed on user_id.
    """

    user_id: UUID
    expiration_date: datetime
    created_at: datetime
