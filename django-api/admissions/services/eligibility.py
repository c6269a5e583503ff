"""Cooldown rule for repeat registrations from the same contact."""

import math
from datetime import datetime, timedelta

from admissions.domain import ContactId, InvalidContactError, Ok, Rejected, Result
from admissions.domain.errors import CooldownActive, InvalidContact
from admissions.stores.interfaces import AdmissionStore

ONE_DAY = timedelta(days=1)


class EligibilityChecker:
    """Enforces at most one registration per contact per cooldown period.

    Running this outside the event lock is only a fast path. The allocator
    runs it again while holding the lock.
    """

    def __init__(self, store: AdmissionStore, cooldown: timedelta = timedelta(days=14)) -> None:
        self._store = store
        self._cooldown = cooldown

    @staticmethod
    def normalize_contact(raw: str | None) -> Result[ContactId]:
        try:
            return Ok(ContactId.normalize(raw))
        except InvalidContactError:
            return Rejected(InvalidContact())

    def check_cooldown(self, contact: ContactId, as_of: datetime) -> Result[None]:
        last = self._store.latest_registration_for_contact(contact, since=as_of - self._cooldown)
        if last is None:
            return Ok(None)
        remaining = last.submitted_at + self._cooldown - as_of
        days_remaining = max(1, math.ceil(remaining / ONE_DAY))
        return Rejected(CooldownActive(last.submitted_at, days_remaining))
