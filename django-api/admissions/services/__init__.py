from admissions.services.allocator import CapacityAllocator
from admissions.services.desk_service import StaffDeskService
from admissions.services.eligibility import EligibilityChecker
from admissions.services.notifications import (
    LogNotifier,
    NotificationDispatcher,
    NotificationJob,
    NotificationResult,
    Notifier,
)
from admissions.services.registration_service import RegistrationService
from admissions.services.sequencer import ReferenceSequencer
from admissions.services.token_validator import TokenValidator

__all__ = [
    "CapacityAllocator",
    "EligibilityChecker",
    "LogNotifier",
    "NotificationDispatcher",
    "NotificationJob",
    "NotificationResult",
    "Notifier",
    "ReferenceSequencer",
    "RegistrationService",
    "StaffDeskService",
    "TokenValidator",
]
