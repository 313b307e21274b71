"""Invalidate JSON snapshots when a wiki changes."""

import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Wiki
from .services.timestamps import DATABASES_KEY, TimestampStore

logger = logging.getLogger(__name__)


def invalidate_wiki(dbname: str) -> None:
    """Mark a wiki's snapshot and the database lists as stale."""
    timestamps = TimestampStore()
    timestamps.reset(dbname)
    timestamps.reset(DATABASES_KEY)
    logger.info("Invalidated JSON snapshots for %s", dbname)


@receiver(post_save, sender=Wiki)
def wiki_saved(sender, instance, raw=False, **kwargs):
    """Invalidate after a wiki is created or edited."""
    if raw:
        # Fixture loading
        return
    invalidate_wiki(instance.dbname)


@receiver(post_delete, sender=Wiki)
def wiki_deleted(sender, instance, **kwargs):
    """Invalidate after a wiki row is removed."""
    invalidate_wiki(instance.dbname)
