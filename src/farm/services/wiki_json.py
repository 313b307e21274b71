"""JSON snapshots of wiki metadata, regenerated when invalidated.

Every wiki on the farm has a ``<wiki>.json`` snapshot, and the farm as a
whole has ``databases.json`` (active wikis) and ``deleted.json`` (deleted
wikis). Each snapshot embeds the invalidation timestamp it was generated
for. Invalidation timestamps live in the shared cache and only move forward
through ``reset_wiki`` and ``reset_database_list``; ``update`` regenerates
whichever snapshots are older than their timestamp.

Typical use::

    wiki_json = WikiJson("examplewiki")
    wiki_json.update()

and, after changing a wiki::

    wiki_json.reset_wiki()
    wiki_json.update()
"""

import logging
from collections.abc import Callable, Iterable

from django.conf import settings
from django.db import connections
from django.utils.module_loading import import_string

from ..models import Wiki, WikiRecord
from .snapshots import DATABASES_SNAPSHOT, DELETED_SNAPSHOT, InvalidSnapshotNameError, SnapshotStore, validate_name
from .staleness import Changes, check_changes
from .timestamps import DATABASES_KEY, TimestampStore

logger = logging.getLogger(__name__)

# Called as builder(wiki, connection, payload); may add keys to payload in place.
JsonBuilder = Callable[[str, object, dict], None]

RESERVED_NAMES = (DATABASES_SNAPSHOT, DELETED_SNAPSHOT)


class WikiNotFound(LookupError):
    """Raised when a wiki does not exist in the farm database."""

    pass


def get_json_builder() -> JsonBuilder | None:
    """Load the JSON builder hook configured in FARM_JSON_BUILDER."""
    path = getattr(settings, "FARM_JSON_BUILDER", "")
    if not path:
        return None
    return import_string(path)


def build_database_lists(records: Iterable[WikiRecord]) -> tuple[dict, dict]:
    """Split wiki records into the active and deleted lists.

    Returns:
        (active, deleted) mappings of wiki id to ``{"s": sitename,
        "c": dbcluster}``. Active entries carry ``"u"`` when a url is set.
    """
    active = {}
    deleted = {}

    for record in records:
        entry = {"s": record.sitename, "c": record.dbcluster}
        if record.deleted:
            deleted[record.dbname] = entry
        else:
            if record.url is not None:
                entry["u"] = record.url
            active[record.dbname] = entry

    return active, deleted


def build_wiki_payload(record: WikiRecord, timestamp: int) -> dict:
    """Build the core JSON payload for a single wiki."""
    return {
        "timestamp": timestamp,
        "database": record.dbname,
        "created": record.creation,
        "dbcluster": record.dbcluster,
        "category": record.category,
        "url": record.url if record.url is not None else False,
        "core": {
            "wgSitename": record.sitename,
            "wgLanguageCode": record.language,
        },
        "states": {
            "private": record.private,
            "closed": record.closed_timestamp if record.closed_timestamp is not None else False,
            "inactive": record.inactive_state,
        },
    }


def write_database_lists(snapshots: SnapshotStore, database: str, timestamp: int) -> bool:
    """Rewrite databases.json and deleted.json, stamped with ``timestamp``.

    Returns:
        True if both files were written.
    """
    queryset = Wiki.objects.using(database).all()
    active, deleted = build_database_lists(WikiRecord.from_model(wiki) for wiki in queryset.iterator())

    active_written = snapshots.write(DATABASES_SNAPSHOT, {"timestamp": timestamp, "combi": active})
    deleted_written = snapshots.write(DELETED_SNAPSHOT, {"timestamp": timestamp, "databases": deleted})

    logger.info(
        "Regenerated database lists at %s (%d active, %d deleted)",
        timestamp,
        len(active),
        len(deleted),
    )
    return active_written and deleted_written


class WikiJson:
    """Keeps the JSON snapshots for one wiki and the farm lists up to date."""

    def __init__(
        self,
        wiki: str,
        timestamps: TimestampStore | None = None,
        snapshots: SnapshotStore | None = None,
        database: str | None = None,
        builder: JsonBuilder | None = None,
    ):
        if validate_name(wiki) in RESERVED_NAMES:
            raise InvalidSnapshotNameError(f"{wiki!r} is reserved for the database lists")

        self.wiki = wiki
        self.timestamps = timestamps or TimestampStore()
        self.snapshots = snapshots or SnapshotStore()
        self.database = database or settings.FARM_DATABASE
        self.builder = builder if builder is not None else get_json_builder()

        # Both lists share one timestamp; the older file decides
        self.databases_snapshot_timestamp = min(
            self.snapshots.timestamp(DATABASES_SNAPSHOT),
            self.snapshots.timestamp(DELETED_SNAPSHOT),
        )
        self.wiki_snapshot_timestamp = self.snapshots.timestamp(wiki)
        self.database_timestamp = self.timestamps.get(DATABASES_KEY)
        self.wiki_timestamp = self.timestamps.get(wiki)

        # Seed a baseline the first time a key is seen
        if not self.database_timestamp:
            self.reset_database_list()

        if not self.wiki_timestamp:
            self.reset_wiki()

    def reset_wiki(self) -> int:
        """Invalidate this wiki's snapshot."""
        self.wiki_timestamp = self.timestamps.reset(self.wiki)
        return self.wiki_timestamp

    def reset_database_list(self) -> int:
        """Invalidate the database lists."""
        self.database_timestamp = self.timestamps.reset(DATABASES_KEY)
        return self.database_timestamp

    def changes(self) -> Changes:
        """Report which snapshots are older than their invalidation timestamp."""
        return check_changes(
            self.databases_snapshot_timestamp,
            self.database_timestamp,
            self.wiki_snapshot_timestamp,
            self.wiki_timestamp,
        )

    def update(self) -> Changes:
        """Regenerate every stale snapshot.

        Both branches always run. If one fails, its error is raised once the
        other has finished.

        Returns:
            The changes that were acted upon.

        Raises:
            WikiNotFound: If the wiki needs regenerating but does not exist.
        """
        changes = self.changes()
        errors = []

        if changes.databases:
            try:
                self.generate_database_list()
            except Exception as e:
                logger.error("Failed to regenerate database lists: %s", e, exc_info=True)
                errors.append(e)

        if changes.wiki:
            try:
                self.generate_wiki()
            except Exception as e:
                logger.error("Failed to regenerate JSON for %s: %s", self.wiki, e, exc_info=True)
                errors.append(e)

        if errors:
            raise errors[0]

        return changes

    def generate_database_list(self) -> bool:
        """Rewrite databases.json and deleted.json from the database.

        Returns:
            True if both files were written.
        """
        written = write_database_lists(self.snapshots, self.database, self.database_timestamp)
        if written:
            self.databases_snapshot_timestamp = self.database_timestamp
        return written

    def generate_wiki(self) -> bool:
        """Rewrite <wiki>.json from the database.

        Returns:
            True if the file was written.

        Raises:
            WikiNotFound: If the wiki does not exist.
        """
        try:
            wiki = Wiki.objects.using(self.database).get(dbname=self.wiki)
        except Wiki.DoesNotExist:
            raise WikiNotFound(f"Wiki {self.wiki!r} can not be found.") from None

        # A first-ever snapshot records 0 so the next update regenerates it again
        timestamp = self.wiki_timestamp if self.snapshots.exists(self.wiki) else 0
        payload = build_wiki_payload(WikiRecord.from_model(wiki), timestamp)

        if self.builder is not None:
            self.builder(self.wiki, connections[self.database], payload)

        written = self.snapshots.write(self.wiki, payload)
        if written:
            self.wiki_snapshot_timestamp = timestamp
            logger.info("Regenerated JSON for %s at %s", self.wiki, timestamp)

        return written
