import json
from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel

from magicauth.utils import to_iso_string

LINK_EXPIRATION_TIME = timedelta(minutes=30)
MAGIC_LINK_SEARCH_PARAM = "kodyKey"
MAGIC_LINK_PATH = "magic"


class MagicLinkClaim(BaseModel):
    """Email address and expiration carried, encrypted, inside a magic link. Never persisted."""

    email_address: str
    expires_at: datetime

    def serialize(self) -> str:
        """Encode as the JSON array [email_address, expires_at_iso]."""
        return json.dumps([self.email_address, to_iso_string(self.expires_at)], ensure_ascii=False)


def parse_claim_payload(payload: str) -> tuple[Any, Any]:
    """Decode a serialized claim into its two raw elements without checking their types.

    Raises ValueError when the payload is not a two-element JSON array.
    """
    data = json.loads(payload)
    if not isinstance(data, list) or len(data) != 2:
        raise ValueError("Claim must be a two-element array")
    return data[0], data[1]
