"""Translate the authenticated Django user into a domain principal."""

from rest_framework.request import Request

from events.domain.value_objects import Principal, Role


def principal_from_request(request: Request) -> Principal | None:
    """Return the caller's principal, or None for anonymous requests."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None

    if user.is_superuser:
        role = Role.ADMIN
    elif user.is_staff:
        role = Role.STAFF
    else:
        role = Role.USER

    return Principal(
        user_id=str(user.pk),
        email=user.email or "",
        name=user.get_full_name() or user.get_username(),
        role=role,
    )
