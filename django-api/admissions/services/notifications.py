"""Post-commit notification hand-off.

Delivery itself belongs to an external provider; this module only defines
the seam and a dispatcher that runs jobs off the request thread. Failures are
logged and never reach the registration result.
"""

import logging
import re
import uuid
from abc import ABC, abstractmethod
from concurrent.futures import Executor
from dataclasses import dataclass

from admissions.domain import ContactId
from admissions.domain.errors import ErrorCode

logger = logging.getLogger(__name__)

E164 = re.compile(r"^\+[1-9]\d{1,14}$")
MAX_MESSAGE_LENGTH = 1600


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class NotificationJob:
    contact: ContactId
    message: str
    reference_number: str


class Notifier(ABC):
    """Interface for outbound message providers."""

    @abstractmethod
    def send(self, contact: ContactId, message: str) -> NotificationResult:
        ...

    @staticmethod
    def check_message(contact: ContactId, message: str) -> str | None:
        """Return why a message cannot be sent, or None if it can."""
        if not E164.match(contact.value):
            return "Invalid phone number format"
        if not message.strip():
            return "Empty message"
        if len(message) > MAX_MESSAGE_LENGTH:
            return f"Message too long (max {MAX_MESSAGE_LENGTH} characters)"
        return None


class LogNotifier(Notifier):
    """Writes messages to the log instead of delivering them."""

    def send(self, contact: ContactId, message: str) -> NotificationResult:
        problem = self.check_message(contact, message)
        if problem:
            return NotificationResult(success=False, error=problem)
        message_id = uuid.uuid4().hex
        logger.info("Notification %s to %s: %s", message_id, contact, message.strip())
        return NotificationResult(success=True, message_id=message_id)


class NotificationDispatcher:
    """Runs notification jobs on an executor owned by the application."""

    def __init__(self, notifier: Notifier, executor: Executor) -> None:
        self._notifier = notifier
        self._executor = executor

    def dispatch(self, job: NotificationJob) -> None:
        try:
            self._executor.submit(self.deliver, job)
        except RuntimeError as exc:
            logger.warning(
                "%s: could not queue notification for %s: %s",
                ErrorCode.NOTIFICATION_FAILURE.value,
                job.reference_number,
                exc,
            )

    def deliver(self, job: NotificationJob) -> NotificationResult:
        try:
            result = self._notifier.send(job.contact, job.message)
        except Exception as exc:
            logger.exception(
                "%s: notifier raised for %s",
                ErrorCode.NOTIFICATION_FAILURE.value,
                job.reference_number,
            )
            return NotificationResult(success=False, error=str(exc))
        if not result.success:
            logger.warning(
                "%s: %s not notified: %s",
                ErrorCode.NOTIFICATION_FAILURE.value,
                job.reference_number,
                result.error,
            )
        return result

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
