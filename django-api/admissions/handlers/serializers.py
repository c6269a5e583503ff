"""Serializers for parsing requests and rendering domain models."""

from rest_framework import serializers

from admissions.domain import RegistrationData


class RegistrationRequestSerializer(serializers.Serializer):
    """Inbound citizen or staff registration form."""

    name = serializers.CharField(max_length=100)
    contact = serializers.CharField(max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)

    def to_registration_data(self) -> RegistrationData:
        data = self.validated_data
        return RegistrationData(
            name=data["name"], contact=data["contact"], email=data.get("email") or None
        )


class AdmissionReceiptSerializer(serializers.Serializer):
    reference_number = serializers.CharField()
    registration_id = serializers.UUIDField(source="registration_id.value")
    submitted_at = serializers.DateTimeField()


class RegistrationSerializer(serializers.Serializer):
    """Serializer for RegistrationRecord domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    name = serializers.CharField()
    contact = serializers.CharField(source="contact.value")
    email = serializers.EmailField(allow_null=True)
    reference_number = serializers.CharField()
    submitted_at = serializers.DateTimeField()
    pickup_confirmed = serializers.BooleanField()
    pickup_confirmed_at = serializers.DateTimeField(allow_null=True)


class EventOccupancySerializer(serializers.Serializer):
    """Serializer for EventOccupancy domain model."""

    id = serializers.UUIDField(source="event.id.value")
    name = serializers.CharField(source="event.name")
    starts_at = serializers.DateTimeField(source="event.starts_at")
    ends_at = serializers.DateTimeField(source="event.ends_at")
    capacity = serializers.IntegerField(source="event.capacity.value")
    used = serializers.IntegerField()
    remaining = serializers.IntegerField()


class TokenLookupSerializer(serializers.Serializer):
    token_id = serializers.UUIDField(source="token.id.value")
    expires_at = serializers.DateTimeField(source="token.expires_at")
    event = EventOccupancySerializer(source="occupancy")
    registrations = RegistrationSerializer(many=True)
