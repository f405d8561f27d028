"""Domain error codes for the events module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    REGISTRATIONS_EXIST = "REGISTRATIONS_EXIST"
    REGISTRATION_NOT_ACTIVE = "REGISTRATION_NOT_ACTIVE"
    SOLD_OUT = "SOLD_OUT"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    PROVIDER_NOT_CONFIGURED = "PROVIDER_NOT_CONFIGURED"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class UnauthorizedError(DomainError):
    """Raised when a request carries no session."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.UNAUTHORIZED, message="Unauthorized")


class ForbiddenError(DomainError):
    """Raised for a wrong role or a caller who does not own the resource."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class RegistrationNotFoundError(DomainError):
    """Raised when a registration is not found."""

    def __init__(self, registration_id: str) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message="Registration not found",
        )
        self.registration_id = registration_id


class ValidationError(DomainError):
    """Raised when a required field is missing or malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)


class ConflictError(DomainError):
    """Base for business-rule conflicts with existing state."""


class AlreadyRegisteredError(ConflictError):
    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_REGISTERED,
            message="You are already registered for this event",
        )
        self.event_id = event_id


class RegistrationsExistError(ConflictError):
    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATIONS_EXIST,
            message="Cannot delete event with active registrations",
        )
        self.event_id = event_id


class RegistrationNotActiveError(ConflictError):
    def __init__(self, registration_id: str) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_ACTIVE,
            message="Registration is not active",
        )
        self.registration_id = registration_id


class SoldOutError(ConflictError):
    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.SOLD_OUT,
            message="No tickets available for this event",
        )
        self.event_id = event_id


class UpstreamUnavailableError(DomainError):
    """Raised when the ticketing provider cannot serve a request."""

    def __init__(self, message: str = "failed to fetch") -> None:
        super().__init__(code=ErrorCode.UPSTREAM_UNAVAILABLE, message=message)


class ProviderNotConfiguredError(UpstreamUnavailableError):
    """Raised when the provider API key is missing."""

    def __init__(self) -> None:
        super().__init__(message="provider key not configured")
        self.code = ErrorCode.PROVIDER_NOT_CONFIGURED
