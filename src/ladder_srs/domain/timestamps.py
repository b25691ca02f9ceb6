"""Timestamp checks shared by the processor, scheduler and state-file loader."""

from datetime import datetime

from .errors import InvalidTimestampError


def require_aware(value: datetime) -> datetime:
    """Return ``value`` unchanged, raising InvalidTimestampError unless it is an aware datetime."""
    if not isinstance(value, datetime):
        raise InvalidTimestampError(value, "expected a datetime")
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidTimestampError(value)
    return value


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """
    Parse an ISO 8601 string (or pass through a datetime).

    A trailing "Z" is accepted. Naive results are rejected rather than
    assumed to be UTC.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return require_aware(value)
    if not isinstance(value, str):
        raise InvalidTimestampError(value, "expected an ISO 8601 string")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidTimestampError(value, str(e)) from e
    return require_aware(parsed)
