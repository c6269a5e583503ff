"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Every read and write
made on behalf of one registration happens inside ``atomic()``.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import datetime

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


class StoreError(Exception):
    """Base class for storage failures."""


class PersistenceError(StoreError):
    """The storage engine failed, timed out acquiring a lock, or lost the connection."""


class DuplicateReferenceError(StoreError):
    """A uniqueness constraint rejected the reference number."""

    def __init__(self, reference_number: str) -> None:
        super().__init__(f"Reference number already exists: {reference_number}")
        self.reference_number = reference_number


class AdmissionStore(ABC):
    """Interface for admission persistence operations."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Open a transaction; leaving the block with an exception rolls it back."""
        ...

    @abstractmethod
    def mark_rollback(self) -> None:
        """Roll back the current transaction when its block exits."""
        ...

    @abstractmethod
    def on_commit(self, callback: Callable[[], None]) -> None:
        """Run callback once the outermost transaction commits."""
        ...

    @abstractmethod
    def get_token(self, token_id: TokenId) -> AdmissionTokenRecord | None:
        """Return a token by ID, or None if not found."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> EventSnapshot | None:
        """Return an event without locking it."""
        ...

    @abstractmethod
    def lock_event(self, event_id: EventId) -> EventSnapshot | None:
        """Take the exclusive per-event lock and return the fresh row.

        The lock is held until the surrounding transaction ends.

        Raises:
            PersistenceError: If the lock is not granted within the timeout.
        """
        ...

    @abstractmethod
    def count_registrations(self, event_id: EventId) -> int:
        """Return the number of committed registrations for an event."""
        ...

    @abstractmethod
    def latest_registration_for_contact(
        self, contact: ContactId, since: datetime
    ) -> RegistrationRecord | None:
        """Return the newest registration for contact submitted after since."""
        ...

    @abstractmethod
    def add_registration(self, registration: NewRegistration) -> RegistrationRecord:
        """Insert a registration.

        Raises:
            DuplicateReferenceError: If the reference number is already taken.
        """
        ...

    @abstractmethod
    def list_open_events(self, now: datetime) -> list[EventOccupancy]:
        """Return active events whose window contains now, ordered by starts_at."""
        ...

    @abstractmethod
    def list_registrations(self, event_id: EventId) -> list[RegistrationRecord]:
        """Return registrations for an event ordered by submitted_at."""
        ...

    @abstractmethod
    def confirm_pickup(
        self, registration_id: RegistrationId, at: datetime
    ) -> RegistrationRecord | None:
        """Flag a registration as picked up, or return None if it does not exist."""
        ...
