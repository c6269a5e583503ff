"""Test doubles and builders shared across test modules."""

from concurrent.futures import Executor, Future
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from admissions.domain import AdmissionTokenRecord, Capacity, EventId, EventSnapshot, TokenId
from admissions.services import NotificationResult, Notifier
from admissions.stores import InMemoryAdmissionStore

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


class RecordingNotifier(Notifier):
    def __init__(self, fail: bool = False) -> None:
        self.sent = []
        self.fail = fail

    def send(self, contact, message):
        if self.fail:
            raise ConnectionError("provider unreachable")
        self.sent.append((contact.value, message))
        return NotificationResult(success=True, message_id=f"msg-{len(self.sent)}")


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now += timedelta(**delta)


def seed_window(
    store: InMemoryAdmissionStore,
    now: datetime = NOW,
    *,
    capacity: int = 10,
    event_active: bool = True,
    token_active: bool = True,
    opens_in: timedelta = timedelta(hours=-1),
    closes_in: timedelta = timedelta(hours=2),
    token_expires_in: timedelta = timedelta(hours=2),
) -> tuple[EventSnapshot, AdmissionTokenRecord]:
    event = EventSnapshot(
        id=EventId(uuid4()),
        name="Saturday distribution",
        capacity=Capacity(capacity),
        starts_at=now + opens_in,
        ends_at=now + closes_in,
        is_active=event_active,
    )
    token = AdmissionTokenRecord(
        id=TokenId(uuid4()),
        event_id=event.id,
        expires_at=now + token_expires_in,
        is_active=token_active,
    )
    store.put_event(event)
    store.put_token(token)
    return event, token

