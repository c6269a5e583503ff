"""Typed view over the ``ADMISSIONS`` settings dict."""

from dataclasses import dataclass, fields
from datetime import timedelta
from typing import Any, Self

from django.conf import settings


@dataclass(frozen=True)
class AdmissionSettings:
    cooldown_days: int = 14
    reference_prefix: str = "FB"
    reference_min_digits: int = 3
    lock_timeout_ms: int = 5000
    notifier_class: str = "admissions.services.notifications.LogNotifier"
    notification_workers: int = 2
    notification_template: str = (
        "Your registration #{reference_number} has been confirmed. "
        "Thank you for using our food bank!"
    )
    active_events_cache_seconds: int = 30

    def __post_init__(self) -> None:
        if self.cooldown_days < 0:
            raise ValueError("COOLDOWN_DAYS cannot be negative")
        if self.reference_min_digits < 1:
            raise ValueError("REFERENCE_MIN_DIGITS must be at least 1")
        if self.lock_timeout_ms < 1:
            raise ValueError("LOCK_TIMEOUT_MS must be positive")
        if self.notification_workers < 1:
            raise ValueError("NOTIFICATION_WORKERS must be at least 1")

    @property
    def cooldown(self) -> timedelta:
        return timedelta(days=self.cooldown_days)

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> Self:
        known = {f.name for f in fields(cls)}
        options = {key.lower(): value for key, value in values.items()}
        unknown = set(options) - known
        if unknown:
            raise ValueError(f"Unknown ADMISSIONS settings: {', '.join(sorted(unknown))}")
        return cls(**options)


def load_settings() -> AdmissionSettings:
    return AdmissionSettings.from_dict(getattr(settings, "ADMISSIONS", {}))
