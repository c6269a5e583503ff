"""Tests for cache behavior.

Invalidation runs on commit, so writes are wrapped in
``django_capture_on_commit_callbacks(execute=True)``.
Run with: pytest tests/test_cache.py -v
"""

from datetime import timedelta

import pytest
from django.core.cache import cache
from django.urls import reverse
from django.utils import timezone

from admissions.handlers.views import ACTIVE_EVENTS_CACHE_KEY
from admissions.models import AdmissionToken, DistributionEvent, Registration


@pytest.fixture
def event() -> DistributionEvent:
    now = timezone.now()
    return DistributionEvent.objects.create(
        name="Evening pantry",
        starts_at=now - timedelta(hours=1),
        ends_at=now + timedelta(hours=2),
        capacity=5,
    )


@pytest.fixture
def warm_cache(staff_client, event):
    response = staff_client.get(reverse("active-events"))
    assert response.status_code == 200
    assert cache.get(ACTIVE_EVENTS_CACHE_KEY) is not None


def make_registration(event: DistributionEvent) -> Registration:
    return Registration.objects.create(
        event=event,
        name="Grace Hopper",
        contact="+12025551234",
        reference_number="FB-20261019-ABCDEF-001",
        submitted_at=timezone.now(),
    )


@pytest.mark.django_db
class TestActiveEventsCache:
    def test_listing_is_served_from_cache(self, staff_client, event, warm_cache):
        """A second read does not see a row written behind the signals' back."""
        DistributionEvent.objects.filter(pk=event.pk).update(capacity=50)

        response = staff_client.get(reverse("active-events"))

        assert response.json()[0]["capacity"] == 5


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_event_save_invalidates_listing(self, event, warm_cache, django_capture_on_commit_callbacks):
        """Saving an event invalidates the active-events cache key."""
        with django_capture_on_commit_callbacks(execute=True):
            event.capacity = 8
            event.save()
        assert cache.get(ACTIVE_EVENTS_CACHE_KEY) is None

    def test_token_save_invalidates_listing(self, event, warm_cache, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            AdmissionToken.objects.create(event=event, expires_at=timezone.now() + timedelta(hours=1))
        assert cache.get(ACTIVE_EVENTS_CACHE_KEY) is None

    def test_registration_save_invalidates_listing(
        self, event, warm_cache, django_capture_on_commit_callbacks
    ):
        """Taking a slot changes the used count, so the listing is dropped."""
        with django_capture_on_commit_callbacks(execute=True):
            make_registration(event)
        assert cache.get(ACTIVE_EVENTS_CACHE_KEY) is None

    def test_event_delete_invalidates_listing(self, event, warm_cache, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            event.delete()
        assert cache.get(ACTIVE_EVENTS_CACHE_KEY) is None

    def test_listing_rebuilt_before_commit_is_dropped_after_commit(
        self, event, django_capture_on_commit_callbacks
    ):
        """A reader that caches pre-commit counts does not outlive the commit."""
        with django_capture_on_commit_callbacks(execute=True):
            make_registration(event)
            cache.set(ACTIVE_EVENTS_CACHE_KEY, [{"id": str(event.id), "used": 0}])
            assert cache.get(ACTIVE_EVENTS_CACHE_KEY) is not None

        assert cache.get(ACTIVE_EVENTS_CACHE_KEY) is None

    def test_uncommitted_write_leaves_listing_alone(self, event, warm_cache, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            make_registration(event)
        assert len(callbacks) == 1
        assert cache.get(ACTIVE_EVENTS_CACHE_KEY) is not None

    def test_listing_reflects_new_registration(
        self, staff_client, api_client, event, warm_cache, django_capture_on_commit_callbacks
    ):
        token = AdmissionToken.objects.create(event=event, expires_at=timezone.now() + timedelta(hours=1))
        url = reverse("token-registration", kwargs={"token_id": str(token.id)})
        with django_capture_on_commit_callbacks(execute=True):
            api_client.post(url, {"name": "Grace Hopper", "contact": "2025551234"}, format="json")

        response = staff_client.get(reverse("active-events"))

        assert response.json()[0]["used"] == 1
