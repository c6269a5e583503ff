"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models

REFERENCE_UNIQUE_CONSTRAINT = "admissions_registration_reference_unique"


class DistributionEvent(models.Model):
    """Persistence model for capacity-bounded distribution windows."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    capacity = models.PositiveIntegerField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["is_active", "starts_at"], name="adm_event_active_start_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(capacity__gte=1),
                name="admissions_event_capacity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(ends_at__gt=models.F("starts_at")),
                name="admissions_event_ends_after_start",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.starts_at:%Y-%m-%d %H:%M})"


class AdmissionToken(models.Model):
    """Persistence model for QR admission tokens."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(
        DistributionEvent, on_delete=models.CASCADE, related_name="tokens"
    )
    expires_at = models.DateTimeField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["event"], name="adm_token_event_idx"),
        ]

    def __str__(self) -> str:
        return str(self.id)


class Registration(models.Model):
    """Persistence model for admitted registrations."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(
        DistributionEvent, on_delete=models.PROTECT, related_name="registrations"
    )
    contact = models.CharField(max_length=32)
    name = models.CharField(max_length=100)
    email = models.EmailField(blank=True, null=True)
    reference_number = models.CharField(max_length=64)
    submitted_at = models.DateTimeField()
    pickup_confirmed = models.BooleanField(default=False)
    pickup_confirmed_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ["submitted_at"]
        indexes = [
            models.Index(fields=["contact", "submitted_at"], name="adm_reg_contact_time_idx"),
            models.Index(fields=["event", "submitted_at"], name="adm_reg_event_time_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["reference_number"],
                name=REFERENCE_UNIQUE_CONSTRAINT,
            ),
        ]

    def __str__(self) -> str:
        return f"{self.reference_number} - {self.name}"
