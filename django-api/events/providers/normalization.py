"""Transform Ticketmaster Discovery payloads into unified external events.

The transform is total over the documented payload shape: every optional
field degrades to a fixed default instead of raising.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from events.domain.categories import normalize
from events.domain.models import (
    Classification,
    ExternalEvent,
    PriceRange,
    PublicSale,
    TicketmasterData,
    Venue,
)
from events.domain.timestamps import utcnow
from events.domain.value_objects import EventId, EventStatus, Price

DEFAULT_VENUE_NAME = "TBA"
DEFAULT_START_TIME = "00:00:00"
DEFAULT_END_TIME = "23:59:59"

STATUS_CODES: dict[str, EventStatus] = {
    "onsale": EventStatus.ACTIVE,
    "cancelled": EventStatus.CANCELLED,
    "postponed": EventStatus.POSTPONED,
    "rescheduled": EventStatus.RESCHEDULED,
}


def _dict(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _first(value: Any) -> Mapping[str, Any]:
    items = _list(value)
    return _dict(items[0]) if items else {}


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value) or None


def _float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _timestamp(node: Mapping[str, Any], default_time: str) -> str | None:
    combined = _text(node.get("dateTime"))
    if combined:
        return combined
    local_date = _text(node.get("localDate"))
    if not local_date:
        return None
    local_time = _text(node.get("localTime")) or default_time
    return f"{local_date}T{local_time}"


def _venue(payload: Mapping[str, Any]) -> Venue:
    venue = _first(_dict(payload.get("_embedded")).get("venues"))
    location = _dict(venue.get("location"))
    return Venue(
        name=_text(venue.get("name")) or DEFAULT_VENUE_NAME,
        address=_text(_dict(venue.get("address")).get("line1")) or "",
        city=_text(_dict(venue.get("city")).get("name")) or "",
        state=_text(_dict(venue.get("state")).get("name")),
        country=_text(_dict(venue.get("country")).get("name")) or "",
        latitude=_float(location.get("latitude")),
        longitude=_float(location.get("longitude")),
    )


def _price(payload: Mapping[str, Any]) -> Price | None:
    first = _first(payload.get("priceRanges"))
    low = _float(first.get("min"))
    high = _float(first.get("max"))
    if low is None and high is None:
        return None
    data = {
        "amount": low if low is not None else high,
        "min": low,
        "max": high,
        "currency": _text(first.get("currency")),
    }
    try:
        return Price.from_dict(data)
    except (ArithmeticError, ValueError):
        return None


def _price_ranges(payload: Mapping[str, Any]) -> tuple[PriceRange, ...]:
    ranges = []
    for item in _list(payload.get("priceRanges")):
        item = _dict(item)
        ranges.append(
            PriceRange(
                type=_text(item.get("type")) or "standard",
                currency=_text(item.get("currency")) or "",
                min=_float(item.get("min")),
                max=_float(item.get("max")),
            )
        )
    return tuple(ranges)


def _classifications(payload: Mapping[str, Any]) -> tuple[Classification, ...]:
    result = []
    for item in _list(payload.get("classifications")):
        item = _dict(item)
        result.append(
            Classification(
                segment=_text(_dict(item.get("segment")).get("name")) or "Other",
                genre=_text(_dict(item.get("genre")).get("name")) or "Other",
                sub_genre=_text(_dict(item.get("subGenre")).get("name")),
            )
        )
    return tuple(result)


def _status(dates: Mapping[str, Any]) -> EventStatus:
    code = _text(_dict(dates.get("status")).get("code")) or ""
    return STATUS_CODES.get(code, EventStatus.ACTIVE)


def to_external_event(payload: Mapping[str, Any], synced_at: datetime | None = None) -> ExternalEvent:
    """Map one provider event onto the unified external variant."""
    payload = _dict(payload)
    original_id = _text(payload.get("id")) or ""
    dates = _dict(payload.get("dates"))
    public_sale = _dict(_dict(payload.get("sales")).get("public"))
    url = _text(payload.get("url")) or ""

    return ExternalEvent(
        id=EventId.for_external(original_id).value if original_id else "tm_unknown",
        name=_text(payload.get("name")) or "",
        description=_text(payload.get("info")) or _text(payload.get("pleaseNote")) or "",
        start_date=_timestamp(_dict(dates.get("start")), DEFAULT_START_TIME) or "",
        end_date=_timestamp(_dict(dates.get("end")), DEFAULT_END_TIME),
        venue=_venue(payload),
        images=tuple(
            image["url"]
            for image in _list(payload.get("images"))
            if isinstance(image, Mapping) and image.get("url")
        ),
        category=normalize(_first(payload.get("classifications")) or None).value,
        price=_price(payload),
        status=_status(dates),
        ticketmaster_data=TicketmasterData(
            original_id=original_id,
            url=url,
            ticket_url=url or None,
            price_ranges=_price_ranges(payload),
            public_sale=PublicSale(
                start_date_time=_text(public_sale.get("startDateTime")),
                end_date_time=_text(public_sale.get("endDateTime")),
            ),
            classifications=_classifications(payload),
        ),
        last_synced=(synced_at or utcnow()).isoformat(),
    )
