"""Builds the service graph once per process."""

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone
from django.utils.module_loading import import_string

from admissions.conf import AdmissionSettings
from admissions.services import (
    CapacityAllocator,
    EligibilityChecker,
    NotificationDispatcher,
    ReferenceSequencer,
    RegistrationService,
    StaffDeskService,
    TokenValidator,
)
from admissions.stores import AdmissionStore, DjangoAdmissionStore


@dataclass(frozen=True)
class Services:
    registrations: RegistrationService
    desk: StaffDeskService
    dispatcher: NotificationDispatcher


def build_services(
    config: AdmissionSettings,
    store: AdmissionStore | None = None,
    dispatcher: NotificationDispatcher | None = None,
    clock: Callable[[], datetime] = timezone.now,
) -> Services:
    store = store or DjangoAdmissionStore(lock_timeout_ms=config.lock_timeout_ms)
    if dispatcher is None:
        notifier = import_string(config.notifier_class)()
        executor = ThreadPoolExecutor(
            max_workers=config.notification_workers, thread_name_prefix="notify"
        )
        dispatcher = NotificationDispatcher(notifier, executor)

    validator = TokenValidator(store)
    eligibility = EligibilityChecker(store, cooldown=config.cooldown)
    allocator = CapacityAllocator(
        store,
        eligibility,
        ReferenceSequencer(config.reference_prefix, config.reference_min_digits),
    )
    registrations = RegistrationService(
        store=store,
        validator=validator,
        eligibility=eligibility,
        allocator=allocator,
        dispatcher=dispatcher,
        message_template=config.notification_template,
        clock=clock,
    )
    return Services(
        registrations=registrations,
        desk=StaffDeskService(store, validator, clock=clock),
        dispatcher=dispatcher,
    )
