"""Integration tests for the registration API.

These go through DRF views, the Django store and the database.
Run with: pytest tests/test_registration_api.py -v
"""

from datetime import datetime, timedelta, timezone as dt_timezone
from uuid import uuid4

import pytest
from django.apps import apps
from django.core.cache import cache
from django.db import DatabaseError, IntegrityError
from django.urls import reverse
from django.utils import timezone
from freezegun import freeze_time
from rest_framework.test import APIClient

from admissions.domain import ContactId, EventId, NewRegistration
from admissions.handlers.views import ACTIVE_EVENTS_CACHE_KEY
from admissions.models import AdmissionToken, DistributionEvent, Registration
from admissions.stores import DjangoAdmissionStore, DuplicateReferenceError
from admissions.stores.django_store import _is_duplicate_reference

T0 = datetime(2026, 10, 19, 12, 0, tzinfo=dt_timezone.utc)


def make_window(
    *,
    capacity: int = 10,
    now: datetime | None = None,
    opens_in: timedelta = timedelta(hours=-1),
    closes_in: timedelta = timedelta(hours=2),
    token_expires_in: timedelta = timedelta(hours=2),
    event_active: bool = True,
    token_active: bool = True,
) -> tuple[DistributionEvent, AdmissionToken]:
    now = now or timezone.now()
    event = DistributionEvent.objects.create(
        name="Community pantry",
        starts_at=now + opens_in,
        ends_at=now + closes_in,
        capacity=capacity,
        is_active=event_active,
    )
    token = AdmissionToken.objects.create(
        event=event, expires_at=now + token_expires_in, is_active=token_active
    )
    return event, token


def submit(client: APIClient, token_id, contact="2025551234", name="Ada Lovelace", **extra):
    url = reverse("token-registration", kwargs={"token_id": str(token_id)})
    return client.post(url, {"name": name, "contact": contact, **extra}, format="json")


@pytest.mark.django_db
class TestTokenRegistration:
    """Tests for POST /api/tokens/{token_id}/registrations"""

    def test_successful_registration_returns_201(self, api_client: APIClient):
        """Given a valid token and an eligible contact, returns the receipt."""
        event, token = make_window()

        response = submit(api_client, token.id, email="ada@example.org")

        assert response.status_code == 201
        body = response.json()
        assert body["reference_number"].endswith("-001")
        assert body["reference_number"].startswith("FB-")
        registration = Registration.objects.get(pk=body["registration_id"])
        assert registration.event_id == event.id
        assert registration.contact == "+12025551234"
        assert registration.email == "ada@example.org"
        assert registration.reference_number == body["reference_number"]

    def test_last_slot_then_quota_exceeded(self, api_client: APIClient):
        """Given capacity 1, the second submission gets 409 with counts."""
        _, token = make_window(capacity=1)

        first = submit(api_client, token.id, contact="2025550001")
        second = submit(api_client, token.id, contact="2025550002")

        assert first.status_code == 201
        assert first.json()["reference_number"].endswith("-001")
        assert second.status_code == 409
        error = second.json()["error"]
        assert error["code"] == "QUOTA_EXCEEDED"
        assert error["details"] == {"capacity": 1, "used": 1}
        assert error["retryable"] is False

    def test_references_increase_per_event(self, api_client: APIClient):
        _, token = make_window(capacity=3)
        references = [
            submit(api_client, token.id, contact=f"202555000{n}").json()["reference_number"]
            for n in range(3)
        ]
        assert [ref[-3:] for ref in references] == ["001", "002", "003"]

    def test_expired_token_returns_410(self, api_client: APIClient):
        """Expiry wins even though the event has free capacity."""
        _, token = make_window(capacity=50, token_expires_in=timedelta(minutes=-1))
        response = submit(api_client, token.id)
        assert response.status_code == 410
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"
        assert Registration.objects.count() == 0

    def test_unknown_token_returns_404(self, api_client: APIClient):
        response = submit(api_client, uuid4())
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "TOKEN_NOT_FOUND"

    def test_inactive_token_returns_404(self, api_client: APIClient):
        _, token = make_window(token_active=False)
        response = submit(api_client, token.id)
        assert response.status_code == 404

    def test_inactive_event_returns_409(self, api_client: APIClient):
        _, token = make_window(event_active=False)
        response = submit(api_client, token.id)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "EVENT_INACTIVE"

    def test_window_not_open_yet_returns_409(self, api_client: APIClient):
        _, token = make_window(opens_in=timedelta(hours=1), closes_in=timedelta(hours=3))
        response = submit(api_client, token.id)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "OUTSIDE_WINDOW"

    def test_invalid_contact_returns_400(self, api_client: APIClient):
        _, token = make_window()
        response = submit(api_client, token.id, contact="12")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_CONTACT"

    def test_missing_name_returns_400(self, api_client: APIClient):
        _, token = make_window()
        url = reverse("token-registration", kwargs={"token_id": str(token.id)})
        response = api_client.post(url, {"contact": "2025551234"}, format="json")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert "name" in response.json()["error"]["details"]

    def test_cooldown_blocks_then_expires(self, api_client: APIClient):
        """A contact is turned away inside 14 days and admitted just after."""
        with freeze_time(T0):
            _, token = make_window(
                now=T0, closes_in=timedelta(days=30), token_expires_in=timedelta(days=30)
            )
            assert submit(api_client, token.id).status_code == 201

        with freeze_time(T0 + timedelta(days=13)):
            blocked = submit(api_client, token.id)
        assert blocked.status_code == 429
        assert blocked.json()["error"]["code"] == "COOLDOWN_ACTIVE"
        assert blocked.json()["error"]["details"]["days_remaining"] == 1

        with freeze_time(T0 + timedelta(days=14, seconds=1)):
            assert submit(api_client, token.id).status_code == 201

    def test_notification_dispatched_after_commit(
        self, api_client: APIClient, django_capture_on_commit_callbacks, monkeypatch
    ):
        dispatched = []
        dispatcher = apps.get_app_config("admissions").services.dispatcher
        monkeypatch.setattr(dispatcher, "dispatch", dispatched.append)
        _, token = make_window()

        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            response = submit(api_client, token.id)
            assert dispatched == []

        for callback in callbacks:
            callback()
        [job] = dispatched
        assert job.contact.value == "+12025551234"
        assert job.reference_number == response.json()["reference_number"]

    def test_reference_collision_fails_closed(self, api_client: APIClient):
        """A reference already issued elsewhere is refused without writing a row."""
        with freeze_time(T0):
            event, token = make_window(now=T0)
            other, _ = make_window(now=T0)
            Registration.objects.create(
                event=other,
                name="Earlier",
                contact="+15550000000",
                reference_number=f"FB-20261019-{event.id.hex.upper()}-001",
                submitted_at=T0 - timedelta(days=30),
            )

            response = submit(api_client, token.id)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_REFERENCE"
        assert not Registration.objects.filter(event=event).exists()


@pytest.mark.django_db
class TestStaffEndpoints:
    """Tests for the authenticated staff desk endpoints."""

    def test_staff_endpoints_require_authentication(self, api_client: APIClient):
        response = api_client.get(reverse("active-events"))
        assert response.status_code in (401, 403)

    def test_active_events_include_used_counts(self, staff_client: APIClient, api_client: APIClient):
        event, token = make_window(capacity=4)
        make_window(event_active=False)
        submit(api_client, token.id)

        response = staff_client.get(reverse("active-events"))

        assert response.status_code == 200
        [item] = response.json()
        assert item["id"] == str(event.id)
        assert item["capacity"] == 4
        assert item["used"] == 1
        assert item["remaining"] == 3

    def test_active_events_storage_failure_returns_503(self, staff_client: APIClient, monkeypatch):
        def unavailable(self, now):
            raise DatabaseError("database is locked")

        monkeypatch.setattr(DjangoAdmissionStore, "list_open_events", unavailable)

        response = staff_client.get(reverse("active-events"))

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "PERSISTENCE_FAILURE"
        assert response["Retry-After"]
        assert cache.get(ACTIVE_EVENTS_CACHE_KEY) is None

    def test_token_lookup_lists_registrations(self, staff_client: APIClient, api_client: APIClient):
        _, token = make_window()
        submit(api_client, token.id, contact="2025550001")
        submit(api_client, token.id, contact="2025550002")

        response = staff_client.get(reverse("token-lookup", kwargs={"token_id": str(token.id)}))

        assert response.status_code == 200
        body = response.json()
        assert body["event"]["used"] == 2
        assert sorted(r["contact"] for r in body["registrations"]) == ["+12025550001", "+12025550002"]

    def test_token_lookup_reports_inactive_token(self, staff_client: APIClient):
        _, token = make_window(token_active=False)
        response = staff_client.get(reverse("token-lookup", kwargs={"token_id": str(token.id)}))
        assert response.status_code == 410
        assert response.json()["error"]["code"] == "TOKEN_INACTIVE"

    def test_manual_registration(self, staff_client: APIClient):
        event, _ = make_window(capacity=2)
        url = reverse("event-registration", kwargs={"event_id": str(event.id)})

        response = staff_client.post(url, {"name": "Walk In", "contact": "12025559999"}, format="json")

        assert response.status_code == 201
        assert Registration.objects.get(event=event).contact == "+12025559999"

    def test_manual_registration_unknown_event(self, staff_client: APIClient):
        url = reverse("event-registration", kwargs={"event_id": str(uuid4())})
        response = staff_client.post(url, {"name": "Walk In", "contact": "2025559999"}, format="json")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "EVENT_NOT_FOUND"

    def test_confirm_pickup(self, staff_client: APIClient, api_client: APIClient):
        _, token = make_window()
        registration_id = submit(api_client, token.id).json()["registration_id"]

        url = reverse("pickup-confirmation", kwargs={"registration_id": registration_id})
        response = staff_client.post(url)

        assert response.status_code == 200
        assert response.json()["pickup_confirmed"] is True
        assert Registration.objects.get(pk=registration_id).pickup_confirmed_at is not None

    def test_confirm_pickup_unknown_registration(self, staff_client: APIClient):
        url = reverse("pickup-confirmation", kwargs={"registration_id": str(uuid4())})
        assert staff_client.post(url).status_code == 404


class _Diag:
    def __init__(self, constraint_name):
        self.constraint_name = constraint_name


class _DriverError(Exception):
    def __init__(self, constraint_name):
        super().__init__("duplicate key value violates unique constraint")
        self.diag = _Diag(constraint_name)


def integrity_error(constraint_name: str) -> IntegrityError:
    try:
        raise IntegrityError("duplicate key on reference_number") from _DriverError(constraint_name)
    except IntegrityError as exc:
        return exc


@pytest.mark.django_db
class TestDjangoStoreDuplicates:
    """Tests for telling reference collisions from other integrity failures."""

    def test_add_registration_raises_duplicate_reference(self):
        event, _ = make_window()
        store = DjangoAdmissionStore()
        registration = NewRegistration(
            event_id=EventId(event.id),
            contact=ContactId("+12025551234"),
            name="Ada Lovelace",
            email=None,
            reference_number="FB-20261019-ABCDEF-001",
            submitted_at=timezone.now(),
        )
        with store.atomic():
            store.add_registration(registration)

        with pytest.raises(DuplicateReferenceError):
            with store.atomic():
                store.add_registration(registration)

        assert Registration.objects.filter(event=event).count() == 1

    def test_constraint_name_identifies_reference_collision(self):
        assert _is_duplicate_reference(integrity_error("admissions_registration_reference_unique"))

    def test_other_constraint_is_not_a_reference_collision(self):
        """A message mentioning references is not enough on its own."""
        assert not _is_duplicate_reference(integrity_error("admissions_event_capacity_positive"))
