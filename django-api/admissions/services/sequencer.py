"""Reference number derivation."""

from datetime import UTC, datetime

from admissions.domain import EventId, ReferenceNumber


class ReferenceSequencer:
    """Builds ``{prefix}-{YYYYMMDD}-{EVENTTAG}-{ordinal}`` references.

    The ordinal is the event's committed count plus one, read under the event
    lock, so it is gap-free per event. The event tag is the whole event id in
    hex, so references from different events never share a prefix.
    """

    def __init__(self, prefix: str = "FB", min_digits: int = 3) -> None:
        self._prefix = prefix
        self._min_digits = min_digits

    def next(self, event_id: EventId, used_count: int, now: datetime) -> ReferenceNumber:
        tag = event_id.value.hex.upper()
        date_prefix = f"{self._prefix}-{now.astimezone(UTC):%Y%m%d}-{tag}"
        return ReferenceNumber(
            prefix=date_prefix, ordinal=used_count + 1, min_digits=self._min_digits
        )
