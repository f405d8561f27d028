"""ISO-8601 helpers shared by aggregation and registration code."""

from datetime import UTC, datetime, time


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string into an aware datetime.

    Naive values are read as UTC. Returns None for empty or unparseable input.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max, tzinfo=moment.tzinfo)


def isoformat(moment: datetime | None) -> str | None:
    if moment is None:
        return None
    return moment.isoformat()
