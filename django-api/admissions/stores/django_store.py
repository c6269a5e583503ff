"""Django ORM implementation of the AdmissionStore."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime

from django.db import DatabaseError, IntegrityError, connections, transaction
from django.db.models import Count

from admissions import models
from admissions.domain import (
    AdmissionTokenRecord,
    Capacity,
    ContactId,
    EventId,
    EventOccupancy,
    EventSnapshot,
    NewRegistration,
    RegistrationId,
    RegistrationRecord,
    TokenId,
)
from admissions.stores.interfaces import (
    AdmissionStore,
    DuplicateReferenceError,
    PersistenceError,
)

logger = logging.getLogger(__name__)


def _to_event(row: models.DistributionEvent) -> EventSnapshot:
    return EventSnapshot(
        id=EventId(row.id),
        name=row.name,
        capacity=Capacity(row.capacity),
        starts_at=row.starts_at,
        ends_at=row.ends_at,
        is_active=row.is_active,
    )


def _to_token(row: models.AdmissionToken) -> AdmissionTokenRecord:
    return AdmissionTokenRecord(
        id=TokenId(row.id),
        event_id=EventId(row.event_id),
        expires_at=row.expires_at,
        is_active=row.is_active,
    )


def _is_duplicate_reference(exc: IntegrityError) -> bool:
    """Tell a reference collision apart from other integrity failures.

    PostgreSQL reports the violated constraint by name. SQLite only names the
    column in its message.
    """
    diag = getattr(exc.__cause__, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint is not None:
        return constraint == models.REFERENCE_UNIQUE_CONSTRAINT
    return "admissions_registration.reference_number" in str(exc)


def _to_registration(row: models.Registration) -> RegistrationRecord:
    return RegistrationRecord(
        id=RegistrationId(row.id),
        event_id=EventId(row.event_id),
        contact=ContactId(row.contact),
        name=row.name,
        email=row.email,
        reference_number=row.reference_number,
        submitted_at=row.submitted_at,
        pickup_confirmed=row.pickup_confirmed,
        pickup_confirmed_at=row.pickup_confirmed_at,
    )


class DjangoAdmissionStore(AdmissionStore):
    """PostgreSQL-backed admission store using Django ORM.

    The event row lock is ``SELECT ... FOR UPDATE`` on the event itself, never
    on the registration count, so a concurrent insert cannot slip in between
    counting and writing. SQLite ignores ``FOR UPDATE``; there the database
    setting ``transaction_mode = IMMEDIATE`` serializes writers instead.
    """

    def __init__(self, using: str = "default", lock_timeout_ms: int = 5000) -> None:
        self._using = using
        self._lock_timeout_ms = lock_timeout_ms

    @contextmanager
    def atomic(self) -> Iterator[None]:
        try:
            with transaction.atomic(using=self._using):
                yield
        except DatabaseError as exc:
            raise PersistenceError(str(exc)) from exc

    def mark_rollback(self) -> None:
        transaction.set_rollback(True, using=self._using)

    def on_commit(self, callback: Callable[[], None]) -> None:
        transaction.on_commit(callback, using=self._using)

    def get_token(self, token_id: TokenId) -> AdmissionTokenRecord | None:
        row = models.AdmissionToken.objects.using(self._using).filter(pk=token_id.value).first()
        return _to_token(row) if row else None

    def get_event(self, event_id: EventId) -> EventSnapshot | None:
        row = models.DistributionEvent.objects.using(self._using).filter(pk=event_id.value).first()
        return _to_event(row) if row else None

    def lock_event(self, event_id: EventId) -> EventSnapshot | None:
        connection = connections[self._using]
        try:
            if connection.vendor == "postgresql":
                with connection.cursor() as cursor:
                    cursor.execute(f"SET LOCAL lock_timeout = {int(self._lock_timeout_ms)}")
            row = (
                models.DistributionEvent.objects.using(self._using)
                .select_for_update()
                .filter(pk=event_id.value)
                .first()
            )
        except DatabaseError as exc:
            logger.warning("Could not lock event %s: %s", event_id.value, exc)
            raise PersistenceError(str(exc)) from exc
        return _to_event(row) if row else None

    def count_registrations(self, event_id: EventId) -> int:
        return models.Registration.objects.using(self._using).filter(event_id=event_id.value).count()

    def latest_registration_for_contact(
        self, contact: ContactId, since: datetime
    ) -> RegistrationRecord | None:
        row = (
            models.Registration.objects.using(self._using)
            .filter(contact=contact.value, submitted_at__gt=since)
            .order_by("-submitted_at")
            .first()
        )
        return _to_registration(row) if row else None

    def add_registration(self, registration: NewRegistration) -> RegistrationRecord:
        try:
            row = models.Registration.objects.using(self._using).create(
                event_id=registration.event_id.value,
                contact=registration.contact.value,
                name=registration.name,
                email=registration.email,
                reference_number=registration.reference_number,
                submitted_at=registration.submitted_at,
            )
        except IntegrityError as exc:
            if _is_duplicate_reference(exc):
                raise DuplicateReferenceError(registration.reference_number) from exc
            raise PersistenceError(str(exc)) from exc
        return _to_registration(row)

    def list_open_events(self, now: datetime) -> list[EventOccupancy]:
        rows = (
            models.DistributionEvent.objects.using(self._using)
            .filter(is_active=True, starts_at__lte=now, ends_at__gte=now)
            .annotate(used=Count("registrations"))
            .order_by("starts_at")
        )
        return [EventOccupancy(event=_to_event(row), used=row.used) for row in rows]

    def list_registrations(self, event_id: EventId) -> list[RegistrationRecord]:
        rows = (
            models.Registration.objects.using(self._using)
            .filter(event_id=event_id.value)
            .order_by("submitted_at")
        )
        return [_to_registration(row) for row in rows]

    def confirm_pickup(
        self, registration_id: RegistrationId, at: datetime
    ) -> RegistrationRecord | None:
        queryset = models.Registration.objects.using(self._using).filter(pk=registration_id.value)
        queryset.filter(pickup_confirmed=False).update(pickup_confirmed=True, pickup_confirmed_at=at)
        row = queryset.first()
        return _to_registration(row) if row else None
