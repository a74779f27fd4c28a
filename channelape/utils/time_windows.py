"""
Time helpers for the ChannelApe client.

Provides the ISO-8601 rendering and parsing the API expects for
date query parameters and request bodies.
"""

from datetime import UTC, datetime


def to_iso8601(dt: datetime) -> str:
    """
    Render a datetime the way the API emits them.

    Naive datetimes are taken to be UTC. Output always carries millisecond
    precision and a ``Z`` suffix.

    Examples:
        >>> to_iso8601(datetime(2018, 5, 1, 18, 7, 58, 9000, tzinfo=UTC))
        '2018-05-01T18:07:58.009Z'
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    dt = dt.astimezone(UTC)
    return f"{dt.strftime('%Y-%m-%dT%H:%M:%S')}.{dt.microsecond // 1000:03d}Z"


def parse_iso8601(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Raises:
        ValueError: If the string is not ISO-8601
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
