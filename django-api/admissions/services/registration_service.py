"""Registration service - the allocation orchestrator.

Services:
- Depend only on interfaces (stores) and on collaborators passed in
- Validate domain invariants
- Perform orchestration and error mapping
- Return Ok or Rejected results, never raise for business rejections

One request moves VALIDATING -> CHECKING_ELIGIBILITY -> ALLOCATING ->
COMMITTED, or stops as Rejected at whichever stage failed. Nothing is
retried here; the caller decides whether to resubmit.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from functools import partial

from django.utils import timezone

from admissions.domain import (
    AdmissionReceipt,
    EventId,
    EventSnapshot,
    Ok,
    Rejected,
    RegistrationData,
    RegistrationRecord,
    Result,
    Stage,
)
from admissions.domain.errors import (
    EventNotFound,
    InvalidEventId,
    PersistenceFailure,
    ValidationFailed,
)
from admissions.services.allocator import CapacityAllocator
from admissions.services.eligibility import EligibilityChecker
from admissions.services.notifications import NotificationDispatcher, NotificationJob
from admissions.services.token_validator import TokenValidator
from admissions.stores.interfaces import AdmissionStore, PersistenceError

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100

EventResolver = Callable[[datetime], Result[EventSnapshot]]


class RegistrationService:
    """Admits one registrant per call as a single unit of work."""

    def __init__(
        self,
        store: AdmissionStore,
        validator: TokenValidator,
        eligibility: EligibilityChecker,
        allocator: CapacityAllocator,
        dispatcher: NotificationDispatcher,
        message_template: str,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._validator = validator
        self._eligibility = eligibility
        self._allocator = allocator
        self._dispatcher = dispatcher
        self._message_template = message_template
        self._clock = clock

    def register(self, token_id: str, data: RegistrationData) -> Result[AdmissionReceipt]:
        """Register through a shared QR token."""
        return self._admit(data, partial(self._validator.validate, token_id))

    def register_for_event(self, event_id: str, data: RegistrationData) -> Result[AdmissionReceipt]:
        """Register at the staff desk, addressing the event directly."""

        def resolve(now: datetime) -> Result[EventSnapshot]:
            try:
                parsed = EventId.from_string(event_id)
            except ValueError:
                return Rejected(InvalidEventId())
            event = self._store.get_event(parsed)
            if event is None:
                return Rejected(EventNotFound())
            return self._validator.check_window(event, now)

        return self._admit(data, resolve)

    def _admit(self, data: RegistrationData, resolve: EventResolver) -> Result[AdmissionReceipt]:
        stage = Stage.VALIDATING
        cleaned = _clean(data)
        if isinstance(cleaned, Rejected):
            return self._reject(cleaned, stage)
        name, email = cleaned.value

        now = self._clock()
        try:
            with self._store.atomic():
                resolved = resolve(now)
                if isinstance(resolved, Rejected):
                    return self._reject(resolved, stage)
                event = resolved.value

                stage = Stage.CHECKING_ELIGIBILITY
                contact = self._eligibility.normalize_contact(data.contact)
                if isinstance(contact, Rejected):
                    return self._reject(contact, stage)
                eligible = self._eligibility.check_cooldown(contact.value, now)
                if isinstance(eligible, Rejected):
                    return self._reject(eligible, stage)

                stage = Stage.ALLOCATING
                allocated = self._allocator.allocate(event.id, contact.value, name, email, now)
                if isinstance(allocated, Rejected):
                    return self._reject(allocated, stage)
                record = allocated.value
                self._store.on_commit(partial(self._dispatcher.dispatch, self._job_for(record)))
        except PersistenceError as exc:
            logger.warning("Registration failed at %s: %s", stage.value, exc)
            return self._reject(Rejected(PersistenceFailure()), stage)

        logger.info(
            "Admitted %s to event %s as %s",
            record.id.value,
            record.event_id.value,
            record.reference_number,
        )
        return Ok(
            AdmissionReceipt(
                reference_number=record.reference_number,
                registration_id=record.id,
                submitted_at=record.submitted_at,
            )
        )

    def _job_for(self, record: RegistrationRecord) -> NotificationJob:
        message = self._message_template.format(
            reference_number=record.reference_number, name=record.name
        )
        return NotificationJob(
            contact=record.contact, message=message, reference_number=record.reference_number
        )

    @staticmethod
    def _reject(result: Rejected, stage: Stage) -> Rejected:
        logger.info("Registration rejected at %s: %s", stage.value, result.reason.code.value)
        return Rejected(result.reason, stage)


def _clean(data: RegistrationData) -> Result[tuple[str, str | None]]:
    name = (data.name or "").strip()
    if not name:
        return Rejected(ValidationFailed("name", "Name is required"))
    if len(name) > MAX_NAME_LENGTH:
        return Rejected(
            ValidationFailed("name", f"Name must be at most {MAX_NAME_LENGTH} characters")
        )
    if not (data.contact or "").strip():
        return Rejected(ValidationFailed("contact", "Phone number is required"))
    email = (data.email or "").strip() or None
    return Ok((name, email))
