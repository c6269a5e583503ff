from django.urls import path

from admissions.handlers import (
    ActiveEventListView,
    EventRegistrationView,
    PickupConfirmationView,
    TokenLookupView,
    TokenRegistrationView,
)

urlpatterns = [
    path("tokens/<str:token_id>", TokenLookupView.as_view(), name="token-lookup"),
    path(
        "tokens/<str:token_id>/registrations",
        TokenRegistrationView.as_view(),
        name="token-registration",
    ),
    path("events/active", ActiveEventListView.as_view(), name="active-events"),
    path(
        "events/<str:event_id>/registrations",
        EventRegistrationView.as_view(),
        name="event-registration",
    ),
    path(
        "registrations/<str:registration_id>/pickup",
        PickupConfirmationView.as_view(),
        name="pickup-confirmation",
    ),
]
