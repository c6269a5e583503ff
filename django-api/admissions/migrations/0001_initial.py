import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DistributionEvent",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("starts_at", models.DateTimeField()),
                ("ends_at", models.DateTimeField()),
                ("capacity", models.PositiveIntegerField()),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["starts_at"],
                "indexes": [
                    models.Index(
                        fields=["is_active", "starts_at"],
                        name="adm_event_active_start_idx",
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(capacity__gte=1),
                        name="admissions_event_capacity_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(ends_at__gt=models.F("starts_at")),
                        name="admissions_event_ends_after_start",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AdmissionToken",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("expires_at", models.DateTimeField()),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tokens",
                        to="admissions.distributionevent",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["event"], name="adm_token_event_idx")
                ],
            },
        ),
        migrations.CreateModel(
            name="Registration",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("contact", models.CharField(max_length=32)),
                ("name", models.CharField(max_length=100)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("reference_number", models.CharField(max_length=64)),
                ("submitted_at", models.DateTimeField()),
                ("pickup_confirmed", models.BooleanField(default=False)),
                ("pickup_confirmed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="registrations",
                        to="admissions.distributionevent",
                    ),
                ),
            ],
            options={
                "ordering": ["submitted_at"],
                "indexes": [
                    models.Index(
                        fields=["contact", "submitted_at"],
                        name="adm_reg_contact_time_idx",
                    ),
                    models.Index(
                        fields=["event", "submitted_at"],
                        name="adm_reg_event_time_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=["reference_number"],
                        name="admissions_registration_reference_unique",
                    )
                ],
            },
        ),
    ]
