"""
Cache invalidation signals
Automatically invalidate cached public listings when catalog data changes
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
import threading
from contextlib import contextmanager

from .cache_utils import invalidate_public_lists

logger = logging.getLogger(__name__)

# Thread-local storage to track signal suspension
_thread_locals = threading.local()


@contextmanager
def suspend_cache_signals():
    """
    Temporarily suspend cache invalidation signals.
    Used for bulk writes; the caller invalidates once afterwards.
    """
    previous = is_suspended()
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = previous


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


def _invalidate(sender, instance):
    if is_suspended():
        return
    logger.debug(f"{sender.__name__} {instance.pk} changed, invalidating public lists")
    invalidate_public_lists()


@receiver([post_save, post_delete], sender='catalog.ProjectType')
def invalidate_on_project_type_change(sender, instance, **kwargs):
    _invalidate(sender, instance)


@receiver([post_save, post_delete], sender='catalog.ShowerType')
def invalidate_on_shower_type_change(sender, instance, **kwargs):
    _invalidate(sender, instance)


@receiver([post_save, post_delete], sender='catalog.Category')
def invalidate_on_category_change(sender, instance, **kwargs):
    _invalidate(sender, instance)


@receiver([post_save, post_delete], sender='designs.UserDesign')
def invalidate_on_user_design_change(sender, instance, **kwargs):
    _invalidate(sender, instance)
