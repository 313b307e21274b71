"""Staleness checks for wiki JSON snapshots."""

from typing import NamedTuple


class Changes(NamedTuple):
    """Which snapshots need regenerating."""

    databases: bool
    wiki: bool


def is_stale(snapshot_timestamp: int | None, invalidation_timestamp: int | None) -> bool:
    """Return True if a snapshot is older than its invalidation timestamp.

    An unset invalidation timestamp never marks a snapshot stale.
    """
    if not invalidation_timestamp:
        return False
    return (snapshot_timestamp or 0) < invalidation_timestamp


def check_changes(
    databases_snapshot: int | None,
    databases_invalidated: int | None,
    wiki_snapshot: int | None,
    wiki_invalidated: int | None,
) -> Changes:
    """Check the database list and a single wiki independently."""
    return Changes(
        databases=is_stale(databases_snapshot, databases_invalidated),
        wiki=is_stale(wiki_snapshot, wiki_invalidated),
    )
