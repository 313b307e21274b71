"""Celery tasks for wiki JSON snapshots."""

from celery import shared_task
from django.conf import settings

from .services.snapshots import SnapshotStore
from .services.timestamps import DATABASES_KEY, TimestampStore
from .services.wiki_json import WikiJson, write_database_lists


@shared_task
def update_wiki_json(wiki: str):
    """Regenerate any stale snapshot for a wiki and the database lists."""
    changes = WikiJson(wiki).update()
    return changes._asdict()


@shared_task
def reset_wiki_json(wiki: str, regenerate: bool = True):
    """Invalidate a wiki's snapshot, then optionally regenerate it."""
    wiki_json = WikiJson(wiki)
    timestamp = wiki_json.reset_wiki()
    if regenerate:
        wiki_json.update()
    return timestamp


@shared_task
def reset_database_list(regenerate: bool = True):
    """Invalidate the farm-wide database lists, then optionally rewrite them."""
    timestamp = TimestampStore().reset(DATABASES_KEY)
    if regenerate:
        write_database_lists(SnapshotStore(), settings.FARM_DATABASE, timestamp)
    return timestamp
