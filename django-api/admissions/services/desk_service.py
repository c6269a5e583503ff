"""Staff desk operations around a running distribution window."""

import logging
from collections.abc import Callable
from datetime import datetime

from django.utils import timezone

from admissions.domain import (
    EventOccupancy,
    Ok,
    Rejected,
    RegistrationId,
    RegistrationRecord,
    Result,
    TokenLookup,
)
from admissions.domain.errors import (
    InvalidRegistrationId,
    PersistenceFailure,
    RegistrationNotFound,
    TokenNotFound,
)
from admissions.services.token_validator import TokenValidator
from admissions.stores.interfaces import AdmissionStore, PersistenceError

logger = logging.getLogger(__name__)


class StaffDeskService:
    """Read-mostly operations for authenticated staff."""

    def __init__(
        self,
        store: AdmissionStore,
        validator: TokenValidator,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._validator = validator
        self._clock = clock

    def active_events(self) -> Result[list[EventOccupancy]]:
        """Return active events open right now with their used counts."""
        try:
            with self._store.atomic():
                occupancies = self._store.list_open_events(self._clock())
        except PersistenceError as exc:
            logger.warning("Active events listing failed: %s", exc)
            return Rejected(PersistenceFailure())
        return Ok(occupancies)

    def lookup_token(self, token_id: str) -> Result[TokenLookup]:
        """Return the window behind a token and everyone registered in it.

        Unlike the public path, a deactivated token is reported as such.
        """
        now = self._clock()
        try:
            with self._store.atomic():
                resolved = self._validator.resolve_token(token_id, now, disclose_inactive=True)
                if isinstance(resolved, Rejected):
                    return resolved
                token = resolved.value
                event = self._store.get_event(token.event_id)
                if event is None:
                    return Rejected(TokenNotFound())
                registrations = self._store.list_registrations(event.id)
        except PersistenceError as exc:
            logger.warning("Token lookup failed: %s", exc)
            return Rejected(PersistenceFailure())

        occupancy = EventOccupancy(event=event, used=len(registrations))
        return Ok(TokenLookup(token=token, occupancy=occupancy, registrations=tuple(registrations)))

    def confirm_pickup(self, registration_id: str) -> Result[RegistrationRecord]:
        """Mark a registration as collected. Confirming twice keeps the first time."""
        try:
            parsed = RegistrationId.from_string(registration_id)
        except ValueError:
            return Rejected(InvalidRegistrationId())

        try:
            with self._store.atomic():
                record = self._store.confirm_pickup(parsed, self._clock())
        except PersistenceError as exc:
            logger.warning("Pickup confirmation failed for %s: %s", registration_id, exc)
            return Rejected(PersistenceFailure())

        if record is None:
            return Rejected(RegistrationNotFound())
        logger.info("Pickup confirmed for %s", record.reference_number)
        return Ok(record)
