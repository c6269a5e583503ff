"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain rejections to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.apps import apps
from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from admissions.domain import Rejected
from admissions.handlers.errors import invalid_payload_response, rejection_response
from admissions.handlers.serializers import (
    AdmissionReceiptSerializer,
    EventOccupancySerializer,
    RegistrationRequestSerializer,
    RegistrationSerializer,
    TokenLookupSerializer,
)

ACTIVE_EVENTS_CACHE_KEY = "admissions:active-events"


def _app():
    return apps.get_app_config("admissions")


class TokenRegistrationView(APIView):
    """Handler for POST /api/tokens/{token_id}/registrations"""

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request: Request, token_id: str) -> Response:
        form = RegistrationRequestSerializer(data=request.data)
        if not form.is_valid():
            return invalid_payload_response(form.errors)

        result = _app().services.registrations.register(token_id, form.to_registration_data())
        if isinstance(result, Rejected):
            return rejection_response(result.reason)
        return Response(AdmissionReceiptSerializer(result.value).data, status=status.HTTP_201_CREATED)


class TokenLookupView(APIView):
    """Handler for GET /api/tokens/{token_id}"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, token_id: str) -> Response:
        result = _app().services.desk.lookup_token(token_id)
        if isinstance(result, Rejected):
            return rejection_response(result.reason)
        return Response(TokenLookupSerializer(result.value).data)


class EventRegistrationView(APIView):
    """Handler for POST /api/events/{event_id}/registrations (staff desk)"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, event_id: str) -> Response:
        form = RegistrationRequestSerializer(data=request.data)
        if not form.is_valid():
            return invalid_payload_response(form.errors)

        result = _app().services.registrations.register_for_event(
            event_id, form.to_registration_data()
        )
        if isinstance(result, Rejected):
            return rejection_response(result.reason)
        return Response(AdmissionReceiptSerializer(result.value).data, status=status.HTTP_201_CREATED)


class ActiveEventListView(APIView):
    """Handler for GET /api/events/active"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        data = cache.get(ACTIVE_EVENTS_CACHE_KEY)
        if data is None:
            app = _app()
            result = app.services.desk.active_events()
            if isinstance(result, Rejected):
                return rejection_response(result.reason)
            data = list(EventOccupancySerializer(result.value, many=True).data)
            cache.set(ACTIVE_EVENTS_CACHE_KEY, data, app.settings.active_events_cache_seconds)
        return Response(data)


class PickupConfirmationView(APIView):
    """Handler for POST /api/registrations/{registration_id}/pickup"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, registration_id: str) -> Response:
        result = _app().services.desk.confirm_pickup(registration_id)
        if isinstance(result, Rejected):
            return rejection_response(result.reason)
        return Response(RegistrationSerializer(result.value).data)
