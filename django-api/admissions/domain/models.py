"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in admissions/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from admissions.domain.value_objects import (
    Capacity,
    ContactId,
    EventId,
    RegistrationId,
    TokenId,
)


@dataclass(frozen=True)
class EventSnapshot:
    """Immutable view of a DistributionEvent read inside a transaction."""

    id: EventId
    name: str
    capacity: Capacity
    starts_at: datetime
    ends_at: datetime
    is_active: bool

    def is_open_at(self, moment: datetime) -> bool:
        return self.starts_at <= moment <= self.ends_at


@dataclass(frozen=True)
class AdmissionTokenRecord:
    """Domain representation of an AdmissionToken."""

    id: TokenId
    event_id: EventId
    expires_at: datetime
    is_active: bool


@dataclass(frozen=True)
class RegistrationData:
    """Raw registration input as submitted by a citizen or staff member."""

    name: str
    contact: str
    email: str | None = None


@dataclass(frozen=True)
class NewRegistration:
    """Validated registration ready to be written by the allocator."""

    event_id: EventId
    contact: ContactId
    name: str
    email: str | None
    reference_number: str
    submitted_at: datetime


@dataclass(frozen=True)
class RegistrationRecord:
    """Domain representation of a Registration."""

    id: RegistrationId
    event_id: EventId
    contact: ContactId
    name: str
    email: str | None
    reference_number: str
    submitted_at: datetime
    pickup_confirmed: bool = False
    pickup_confirmed_at: datetime | None = None


@dataclass(frozen=True)
class AdmissionReceipt:
    """What a successful registration hands back to the caller."""

    reference_number: str
    registration_id: RegistrationId
    submitted_at: datetime


@dataclass(frozen=True)
class EventOccupancy:
    """An event together with its committed registration count."""

    event: EventSnapshot
    used: int

    @property
    def remaining(self) -> int:
        return max(self.event.capacity.value - self.used, 0)


@dataclass(frozen=True)
class TokenLookup:
    """Staff view of the window behind a token."""

    token: AdmissionTokenRecord
    occupancy: EventOccupancy
    registrations: tuple[RegistrationRecord, ...] = ()
