"""Signal handlers for cache invalidation.

Automatically invalidates analytics caches when feeding records change.
"""

from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from feedings.models import FeedingRecord

from .cache import invalidate_baby_analytics


@receiver(pre_save, sender=FeedingRecord, dispatch_uid="remember_feeding_baby")
def remember_previous_baby(sender, instance, **kwargs):
    """Record the stored baby_id so a record moved to another baby clears both."""
    if instance._state.adding:
        return
    instance._previous_baby_id = (
        FeedingRecord.objects.filter(pk=instance.pk)
        .values_list("baby_id", flat=True)
        .first()
    )


@receiver(post_save, sender=FeedingRecord, dispatch_uid="invalidate_feeding_analytics")
def invalidate_analytics_on_feeding_save(sender, instance, **kwargs):
    """Invalidate analytics when a feeding record is created or updated."""
    invalidate_baby_analytics(instance.baby_id)
    previous_baby_id = getattr(instance, "_previous_baby_id", None)
    if previous_baby_id and previous_baby_id != instance.baby_id:
        invalidate_baby_analytics(previous_baby_id)


@receiver(
    post_delete, sender=FeedingRecord, dispatch_uid="invalidate_feeding_analytics_delete"
)
def invalidate_analytics_on_feeding_delete(sender, instance, **kwargs):
    """Invalidate analytics when a feeding record is deleted."""
    invalidate_baby_analytics(instance.baby_id)
