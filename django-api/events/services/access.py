"""Authorization checks shared by services.

The principal always arrives as an argument; nothing here reads request
state.
"""

from events.domain.errors import ForbiddenError, UnauthorizedError
from events.domain.value_objects import Principal


def require_principal(principal: Principal | None) -> Principal:
    if principal is None:
        raise UnauthorizedError()
    return principal


def require_staff(principal: Principal | None) -> Principal:
    principal = require_principal(principal)
    if not principal.is_staff:
        raise ForbiddenError()
    return principal


def require_owner(principal: Principal, owner_id: str, message: str = "Forbidden") -> None:
    if principal.user_id != owner_id:
        raise ForbiddenError(message)
