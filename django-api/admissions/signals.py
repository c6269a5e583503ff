"""Django signals for cache invalidation.

The active-events listing carries used counts, so any change to an event,
a token or a registration makes it stale. The key is dropped once the write
commits.
"""

from django.core.cache import cache
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from admissions.handlers.views import ACTIVE_EVENTS_CACHE_KEY
from admissions.models import AdmissionToken, DistributionEvent, Registration


def clear_active_events() -> None:
    cache.delete(ACTIVE_EVENTS_CACHE_KEY)


@receiver([post_save, post_delete], sender=DistributionEvent)
def invalidate_event_cache(sender, instance, using, **kwargs):
    """Invalidate the listing when an event is saved or deleted."""
    transaction.on_commit(clear_active_events, using=using)


@receiver([post_save, post_delete], sender=AdmissionToken)
def invalidate_token_cache(sender, instance, using, **kwargs):
    transaction.on_commit(clear_active_events, using=using)


@receiver([post_save, post_delete], sender=Registration)
def invalidate_registration_cache(sender, instance, using, **kwargs):
    """Invalidate the listing when a slot is taken or released."""
    transaction.on_commit(clear_active_events, using=using)
