"""Capacity-safe slot allocation.

The event row is locked before anything is counted. Locking only the
registration count is not enough under read committed: a concurrent
transaction can insert after our count and before our insert, and both
commits then exceed capacity.
"""

import logging
from datetime import datetime

from admissions.domain import (
    ContactId,
    EventId,
    NewRegistration,
    Ok,
    Rejected,
    RegistrationRecord,
    Result,
)
from admissions.domain.errors import (
    DuplicateReference,
    EventInactive,
    EventNotFound,
    QuotaExceeded,
    Rejection,
)
from admissions.services.eligibility import EligibilityChecker
from admissions.services.sequencer import ReferenceSequencer
from admissions.stores.interfaces import AdmissionStore, DuplicateReferenceError

logger = logging.getLogger(__name__)


class CapacityAllocator:
    """Sole writer of new registrations."""

    def __init__(
        self,
        store: AdmissionStore,
        eligibility: EligibilityChecker,
        sequencer: ReferenceSequencer,
    ) -> None:
        self._store = store
        self._eligibility = eligibility
        self._sequencer = sequencer

    def allocate(
        self,
        event_id: EventId,
        contact: ContactId,
        name: str,
        email: str | None,
        now: datetime,
    ) -> Result[RegistrationRecord]:
        """Reserve one slot and write the registration.

        Joins the caller's transaction when there is one. Every rejection
        marks the transaction for rollback; the event lock is released when
        the transaction ends.

        Raises:
            PersistenceError: If the lock cannot be taken in time or storage fails.
        """
        with self._store.atomic():
            event = self._store.lock_event(event_id)
            if event is None:
                return self._abort(EventNotFound())
            if not event.is_active:
                return self._abort(EventInactive())

            eligible = self._eligibility.check_cooldown(contact, now)
            if isinstance(eligible, Rejected):
                return self._abort(eligible.reason)

            used = self._store.count_registrations(event_id)
            capacity = event.capacity.value
            if used >= capacity:
                logger.info("Event %s is full (%d/%d)", event_id.value, used, capacity)
                return self._abort(QuotaExceeded(capacity=capacity, used=used))

            reference = str(self._sequencer.next(event_id, used, now))
            try:
                record = self._store.add_registration(
                    NewRegistration(
                        event_id=event_id,
                        contact=contact,
                        name=name,
                        email=email,
                        reference_number=reference,
                        submitted_at=now,
                    )
                )
            except DuplicateReferenceError:
                logger.error("Reference %s already issued; refusing to retry", reference)
                return self._abort(DuplicateReference(reference))
            return Ok(record)

    def _abort(self, reason: Rejection) -> Rejected:
        self._store.mark_rollback()
        return Rejected(reason)
