from admissions.handlers.views import (
    ActiveEventListView,
    EventRegistrationView,
    PickupConfirmationView,
    TokenLookupView,
    TokenRegistrationView,
)

__all__ = [
    "ActiveEventListView",
    "EventRegistrationView",
    "PickupConfirmationView",
    "TokenLookupView",
    "TokenRegistrationView",
]
