"""Resolves admission tokens to the distribution window they open."""

from datetime import datetime

from admissions.domain import AdmissionTokenRecord, EventSnapshot, Ok, Rejected, Result, TokenId
from admissions.domain.errors import (
    EventInactive,
    OutsideWindow,
    TokenExpired,
    TokenInactive,
    TokenNotFound,
)
from admissions.stores.interfaces import AdmissionStore


class TokenValidator:
    """Checks token activation and expiry, then the bound event's window."""

    def __init__(self, store: AdmissionStore) -> None:
        self._store = store

    def resolve_token(
        self, token_id: str, now: datetime, *, disclose_inactive: bool = False
    ) -> Result[AdmissionTokenRecord]:
        """Return the token if it exists, is active and has not expired.

        Inactive tokens are reported as not found unless disclose_inactive is
        set, so the public endpoint does not reveal which tokens once existed.
        """
        try:
            parsed = TokenId.from_string(token_id)
        except ValueError:
            return Rejected(TokenNotFound())

        token = self._store.get_token(parsed)
        if token is None:
            return Rejected(TokenNotFound())
        if not token.is_active:
            return Rejected(TokenInactive() if disclose_inactive else TokenNotFound())
        if now >= token.expires_at:
            return Rejected(TokenExpired(token.expires_at))
        return Ok(token)

    def validate(self, token_id: str, now: datetime) -> Result[EventSnapshot]:
        """Return a snapshot of the event the token admits to.

        Expiry is checked before anything about the event, so an expired
        token is rejected regardless of remaining capacity.
        """
        resolved = self.resolve_token(token_id, now)
        if isinstance(resolved, Rejected):
            return resolved

        event = self._store.get_event(resolved.value.event_id)
        if event is None:
            return Rejected(TokenNotFound())
        return self.check_window(event, now)

    def check_window(self, event: EventSnapshot, now: datetime) -> Result[EventSnapshot]:
        if not event.is_active:
            return Rejected(EventInactive())
        if not event.is_open_at(now):
            return Rejected(OutsideWindow(event.starts_at, event.ends_at))
        return Ok(event)
