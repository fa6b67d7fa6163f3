from collections.abc import Callable
from datetime import UTC, datetime

type Clock = Callable[[], datetime]


def now() -> datetime:
    return datetime.now(UTC)


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision, matching what BSON dates can store."""
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def to_iso_string(value: datetime) -> str:
    """Format as ISO-8601 UTC with milliseconds and a Z suffix."""
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_string(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC. Raises ValueError."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
