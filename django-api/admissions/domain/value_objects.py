"""Domain primitives that enforce validity at creation time."""

import re
from dataclasses import dataclass
from typing import Self
from uuid import UUID

_CONTACT_NOISE = re.compile(r"[^\d+]")


class InvalidContactError(ValueError):
    """Raised when a contact identifier cannot be normalized."""


@dataclass(frozen=True)
class EventId:
    """Unique identifier for a DistributionEvent."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))


@dataclass(frozen=True)
class TokenId:
    """Opaque admission token identifier (the QR payload)."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))


@dataclass(frozen=True)
class RegistrationId:
    """Unique identifier for a Registration."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))


@dataclass(frozen=True)
class Capacity:
    """Number of slots in a distribution window, at least one."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Capacity must be at least 1")


@dataclass(frozen=True)
class ContactId:
    """Normalized phone contact in E.164-like form."""

    value: str

    @classmethod
    def normalize(cls, raw: str | None) -> Self:
        """Normalize a user-entered phone number.

        Everything except digits and ``+`` is stripped. A value already
        starting with ``+`` is kept as is, ten digits are treated as a
        domestic number and eleven digits with a leading ``1`` get a ``+``.

        Raises:
            InvalidContactError: If no rule applies.
        """
        cleaned = _CONTACT_NOISE.sub("", raw or "")
        if cleaned.startswith("+"):
            if not any(ch.isdigit() for ch in cleaned):
                raise InvalidContactError(f"Invalid contact: {raw!r}")
            return cls(value=cleaned)
        if len(cleaned) == 10:
            return cls(value=f"+1{cleaned}")
        if len(cleaned) == 11 and cleaned.startswith("1"):
            return cls(value=f"+{cleaned}")
        raise InvalidContactError(f"Invalid contact: {raw!r}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ReferenceNumber:
    """Reference issued on admission.

    Rendered as ``{prefix}-{ordinal}``, e.g. FB-20261019-3F2A9C10000040008000000000000001-001.
    """

    prefix: str
    ordinal: int
    min_digits: int = 3

    def __post_init__(self) -> None:
        if self.ordinal < 1:
            raise ValueError("Reference ordinal must be positive")

    def __str__(self) -> str:
        return f"{self.prefix}-{self.ordinal:0{self.min_digits}d}"
