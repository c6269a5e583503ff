"""Tagged results returned by services instead of raising for rejections."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from admissions.domain.errors import Rejection

T = TypeVar("T")


class Stage(Enum):
    """Stages one registration request moves through."""

    VALIDATING = "validating"
    CHECKING_ELIGIBILITY = "checking_eligibility"
    ALLOCATING = "allocating"
    COMMITTED = "committed"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """Terminal failure, with the stage the request was in when it stopped."""

    reason: Rejection
    stage: Stage | None = None

    @property
    def ok(self) -> bool:
        return False


Result = Ok[T] | Rejected
