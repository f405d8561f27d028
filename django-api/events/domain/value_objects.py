"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Self

EXTERNAL_ID_PREFIX = "tm_"


class EventSource(StrEnum):
    """Origin of a unified event."""

    PLATFORM = "platform"
    TICKETMASTER = "ticketmaster"


class EventStatus(StrEnum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"
    RESCHEDULED = "rescheduled"
    COMPLETED = "completed"


class RegistrationStatus(StrEnum):
    """Registration states. ENDED is derived at read time and never stored."""

    REGISTERED = "registered"
    CANCELLED = "cancelled"
    ATTENDED = "attended"
    ENDED = "ended"


class SourceFilter(StrEnum):
    ALL = "all"
    PLATFORM = "platform"
    TICKETMASTER = "ticketmaster"


class Role(StrEnum):
    USER = "user"
    STAFF = "staff"
    ADMIN = "admin"


@dataclass(frozen=True)
class EventId:
    """Unified identifier; the namespace prefix alone decides the source."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Event id cannot be empty")
        if self.value == EXTERNAL_ID_PREFIX:
            raise ValueError("External event id is missing the provider id")

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=value.strip())

    @classmethod
    def for_external(cls, original_id: str) -> Self:
        return cls(value=f"{EXTERNAL_ID_PREFIX}{original_id}")

    @property
    def source(self) -> EventSource:
        if self.value.startswith(EXTERNAL_ID_PREFIX):
            return EventSource.TICKETMASTER
        return EventSource.PLATFORM

    @property
    def original_id(self) -> str:
        """Provider-native id for external events, the id itself otherwise."""
        return self.value.removeprefix(EXTERNAL_ID_PREFIX)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Price:
    """Price representation with validation.

    ``amount`` is the headline figure; ``min``/``max`` carry a range when the
    source provides one.
    """

    amount: Decimal
    currency: str
    min: Decimal | None = None
    max: Decimal | None = None

    def __post_init__(self) -> None:
        for value in (self.amount, self.min, self.max):
            if value is not None and value < 0:
                raise ValueError("Price amount cannot be negative")

    @classmethod
    def from_dict(cls, data: dict | None) -> Self | None:
        if not data:
            return None
        low = data.get("min")
        high = data.get("max")
        amount = data.get("amount", low)
        if amount is None:
            return None
        return cls(
            amount=Decimal(str(amount)),
            currency=data.get("currency") or "USD",
            min=Decimal(str(low)) if low is not None else None,
            max=Decimal(str(high)) if high is not None else None,
        )

    def to_dict(self) -> dict:
        data = {"amount": float(self.amount), "currency": self.currency}
        if self.min is not None:
            data["min"] = float(self.min)
        if self.max is not None:
            data["max"] = float(self.max)
        return data

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")

    def resize(self, new_capacity: int, available_tickets: int) -> tuple[Self, int]:
        """Return the new capacity and the recomputed available tickets.

        Seats already taken stay taken; availability bottoms out at zero when
        capacity shrinks below them.
        """
        taken = self.value - available_tickets
        resized = type(self)(value=new_capacity)
        return resized, max(0, new_capacity - taken)


@dataclass(frozen=True)
class Principal:
    """Identity supplied by the session layer."""

    user_id: str
    email: str
    name: str
    role: Role = Role.USER

    @property
    def is_staff(self) -> bool:
        return self.role in (Role.STAFF, Role.ADMIN)
