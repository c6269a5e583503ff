"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from admissions.conf import AdmissionSettings
from admissions.services import NotificationDispatcher
from admissions.stores import InMemoryAdmissionStore
from admissions.wiring import build_services
from helpers import NOW, FrozenClock, InlineExecutor, RecordingNotifier


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def staff_client(django_user_model) -> APIClient:
    user = django_user_model.objects.create_user(username="desk", password="desk-pass")
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def memory_store() -> InMemoryAdmissionStore:
    return InMemoryAdmissionStore(lock_timeout=5.0)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def services(memory_store, notifier, clock):
    dispatcher = NotificationDispatcher(notifier, InlineExecutor())
    return build_services(AdmissionSettings(), store=memory_store, dispatcher=dispatcher, clock=clock)
