from typing import Any
from urllib.parse import urlsplit, urlunsplit
from uuid import UUID, uuid4

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pymongo import AsyncMongoClient

from magicauth.config import Config

logger = structlog.get_logger(__name__)

LOCAL_HOSTS = ("localhost", "127.0.0.1")


class MongoModel(BaseModel):
    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data


def mask_database_url(database_url: str) -> str:
    """Replace the password in a database URL with asterisks."""
    parts = urlsplit(database_url)
    if not parts.password:
        return database_url
    netloc = parts.netloc.replace(f":{parts.password}@", ":**************@", 1)
    return urlunsplit(parts._replace(netloc=netloc))


def is_local_database(database_url: str) -> bool:
    return urlsplit(database_url).hostname in LOCAL_HOSTS


def create_mongo_client(config: Config) -> AsyncMongoClient[dict[str, Any]]:
    """Create the process-wide MongoDB client.

    The caller owns the client; it is closed by Core on shutdown.
    """
    if not config.is_production and not is_local_database(config.database_url):
        logger.warning("non_localhost_database", database_url=mask_database_url(config.database_url))
    return AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
