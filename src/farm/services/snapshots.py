"""Filesystem storage for wiki JSON snapshots."""

import fcntl
import json
import logging
import os
import tempfile
from pathlib import Path

from django.conf import settings

logger = logging.getLogger(__name__)

DATABASES_SNAPSHOT = "databases"
DELETED_SNAPSHOT = "deleted"
TEMP_SUFFIX = ".tmp"
SNAPSHOT_MODE = 0o644  # mkstemp creates files as 0600


class InvalidSnapshotNameError(ValueError):
    """Raised when a snapshot name would escape the cache directory."""

    pass


def validate_name(name: str) -> str:
    """Validate a snapshot name (a wiki id or one of the list names)."""
    if not name:
        raise InvalidSnapshotNameError("Snapshot name cannot be empty")

    if "/" in name or "\\" in name or "\x00" in name:
        raise InvalidSnapshotNameError(f"Invalid snapshot name: {name!r}")

    if name in (".", ".."):
        raise InvalidSnapshotNameError(f"Invalid snapshot name: {name!r}")

    return name


class SnapshotStore:
    """Directory of ``<name>.json`` snapshots, each carrying a ``timestamp``."""

    def __init__(self, directory: Path | str | None = None):
        self.directory = Path(directory or settings.FARM_CACHE_DIRECTORY)

    def path_for(self, name: str) -> Path:
        """Return the snapshot file path for ``name``."""
        return self.directory / f"{validate_name(name)}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def load(self, name: str) -> dict:
        """Read a snapshot.

        Missing or unreadable files come back as ``{"timestamp": 0}`` so
        they always compare as stale.
        """
        file_path = self.path_for(name)
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {"timestamp": 0}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable snapshot %s: %s", file_path, e)
            return {"timestamp": 0}

        if not isinstance(data, dict):
            logger.warning("Ignoring snapshot %s: not a JSON object", file_path)
            return {"timestamp": 0}

        return data

    def timestamp(self, name: str) -> int:
        """Return the timestamp embedded in a snapshot, 0 when absent."""
        try:
            return int(self.load(name).get("timestamp") or 0)
        except (TypeError, ValueError):
            return 0

    def write(self, name: str, data: dict) -> bool:
        """Atomically replace a snapshot.

        The document is written to a locked temporary file in the same
        directory and renamed over the target. Each writer gets its own
        temporary file, so concurrent regenerations never interleave. On
        failure the previous snapshot is left in place and False is returned.
        """
        file_path = self.path_for(name)

        try:
            payload = json.dumps(data)
        except (TypeError, ValueError) as e:
            logger.error("Failed to serialize snapshot %s: %s", file_path, e, exc_info=True)
            return False

        temp_path = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(dir=self.directory, prefix=file_path.name + ".", suffix=TEMP_SUFFIX)
            temp_path = Path(temp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(temp_path, SNAPSHOT_MODE)
            os.replace(temp_path, file_path)
        except OSError as e:
            logger.error("Failed to write snapshot %s: %s", file_path, e, exc_info=True)
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            return False

        return True
