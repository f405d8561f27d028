"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime

import pytest
from rest_framework.test import APIClient

from fakes import FakeProvider, InMemoryEventStore, InMemoryRegistrationStore

NOW = datetime(2030, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def registration_store(event_store) -> InMemoryRegistrationStore:
    return InMemoryRegistrationStore(event_store)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(
        username="uma", email="uma@example.com", password="pw", first_name="Uma"
    )


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(username="otto", password="pw")


@pytest.fixture
def staff_user(django_user_model):
    return django_user_model.objects.create_user(
        username="sam", email="sam@example.com", password="pw", is_staff=True
    )


@pytest.fixture
def other_staff_user(django_user_model):
    return django_user_model.objects.create_user(username="olly", password="pw", is_staff=True)


@pytest.fixture
def provider_override(monkeypatch):
    """Replace the Ticketmaster client used by the views with a fake."""
    from events.handlers import dependencies

    fake = FakeProvider()
    monkeypatch.setattr(dependencies, "build_provider", lambda: fake)
    return fake
