"""In-process implementation of the AdmissionStore.

Keeps the same transactional contract as the Django store: writes are staged
until the outermost ``atomic()`` block commits, and ``lock_event`` holds a
per-event lock until then. Only safe within a single process; used for tests
and local experiments.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID, uuid4

from admissions.domain import (
    AdmissionTokenRecord,
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


@dataclass
class _Transaction:
    staged: list[RegistrationRecord] = field(default_factory=list)
    held: list[threading.Lock] = field(default_factory=list)
    callbacks: list[Callable[[], None]] = field(default_factory=list)
    rollback: bool = False


class InMemoryAdmissionStore(AdmissionStore):
    """Dictionary-backed store with per-event locks."""

    def __init__(self, lock_timeout: float = 5.0) -> None:
        self._lock_timeout = lock_timeout
        self._events: dict[UUID, EventSnapshot] = {}
        self._tokens: dict[UUID, AdmissionTokenRecord] = {}
        self._registrations: dict[UUID, RegistrationRecord] = {}
        self._event_locks: dict[UUID, threading.Lock] = {}
        self._data_lock = threading.Lock()
        self._local = threading.local()

    # Seeding, done by the management side in production.

    def put_event(self, event: EventSnapshot) -> None:
        with self._data_lock:
            self._events[event.id.value] = event
            self._event_locks.setdefault(event.id.value, threading.Lock())

    def put_token(self, token: AdmissionTokenRecord) -> None:
        with self._data_lock:
            self._tokens[token.id.value] = token

    def put_registration(self, registration: RegistrationRecord) -> None:
        with self._data_lock:
            self._registrations[registration.id.value] = registration

    # Transactions

    def _current(self) -> _Transaction | None:
        return getattr(self._local, "transaction", None)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if self._current() is not None:
            yield
            return
        state = _Transaction()
        self._local.transaction = state
        try:
            yield
        except BaseException:
            self._finish(state, commit=False)
            raise
        self._finish(state, commit=not state.rollback)

    def _finish(self, state: _Transaction, commit: bool) -> None:
        try:
            if commit:
                with self._data_lock:
                    for record in state.staged:
                        self._registrations[record.id.value] = record
        finally:
            self._local.transaction = None
            for lock in reversed(state.held):
                lock.release()
        if commit:
            for callback in state.callbacks:
                callback()

    def mark_rollback(self) -> None:
        state = self._current()
        if state is None:
            raise RuntimeError("mark_rollback() called outside atomic()")
        state.rollback = True

    def on_commit(self, callback: Callable[[], None]) -> None:
        state = self._current()
        if state is None:
            callback()
        else:
            state.callbacks.append(callback)

    # Reads and writes

    def _visible(self) -> list[RegistrationRecord]:
        state = self._current()
        with self._data_lock:
            committed = list(self._registrations.values())
        return committed + (state.staged if state else [])

    def get_token(self, token_id: TokenId) -> AdmissionTokenRecord | None:
        with self._data_lock:
            return self._tokens.get(token_id.value)

    def get_event(self, event_id: EventId) -> EventSnapshot | None:
        with self._data_lock:
            return self._events.get(event_id.value)

    def lock_event(self, event_id: EventId) -> EventSnapshot | None:
        state = self._current()
        if state is None:
            raise RuntimeError("lock_event() called outside atomic()")
        with self._data_lock:
            lock = self._event_locks.get(event_id.value)
        if lock is None:
            return None
        if lock not in state.held:
            if not lock.acquire(timeout=self._lock_timeout):
                raise PersistenceError(f"Timed out waiting for lock on event {event_id.value}")
            state.held.append(lock)
        return self.get_event(event_id)

    def count_registrations(self, event_id: EventId) -> int:
        return sum(1 for record in self._visible() if record.event_id == event_id)

    def latest_registration_for_contact(
        self, contact: ContactId, since: datetime
    ) -> RegistrationRecord | None:
        matches = [
            record
            for record in self._visible()
            if record.contact == contact and record.submitted_at > since
        ]
        return max(matches, key=lambda record: record.submitted_at, default=None)

    def add_registration(self, registration: NewRegistration) -> RegistrationRecord:
        state = self._current()
        if state is None:
            raise RuntimeError("add_registration() called outside atomic()")
        if any(r.reference_number == registration.reference_number for r in self._visible()):
            raise DuplicateReferenceError(registration.reference_number)
        record = RegistrationRecord(
            id=RegistrationId(uuid4()),
            event_id=registration.event_id,
            contact=registration.contact,
            name=registration.name,
            email=registration.email,
            reference_number=registration.reference_number,
            submitted_at=registration.submitted_at,
        )
        state.staged.append(record)
        return record

    def list_open_events(self, now: datetime) -> list[EventOccupancy]:
        with self._data_lock:
            events = [e for e in self._events.values() if e.is_active and e.is_open_at(now)]
        events.sort(key=lambda event: event.starts_at)
        return [EventOccupancy(event=e, used=self.count_registrations(e.id)) for e in events]

    def list_registrations(self, event_id: EventId) -> list[RegistrationRecord]:
        records = [r for r in self._visible() if r.event_id == event_id]
        return sorted(records, key=lambda record: record.submitted_at)

    def confirm_pickup(
        self, registration_id: RegistrationId, at: datetime
    ) -> RegistrationRecord | None:
        with self._data_lock:
            record = self._registrations.get(registration_id.value)
            if record is None:
                return None
            if not record.pickup_confirmed:
                record = replace(record, pickup_confirmed=True, pickup_confirmed_at=at)
                self._registrations[registration_id.value] = record
            return record
