"""Tests for the JSON snapshot store."""

import json
import os
from unittest.mock import patch

import pytest
from django.test import override_settings

from farm.services.snapshots import InvalidSnapshotNameError, SnapshotStore, validate_name


class TestValidateName:
    """Tests for snapshot name validation."""

    def test_valid_name(self):
        assert validate_name("examplewiki") == "examplewiki"

    def test_empty_name_raises(self):
        with pytest.raises(InvalidSnapshotNameError, match="cannot be empty"):
            validate_name("")

    @pytest.mark.parametrize("name", ["../etc", "a/b", "a\\b", "bad\x00name", "..", "."])
    def test_path_components_raise(self, name):
        with pytest.raises(InvalidSnapshotNameError):
            validate_name(name)


class TestLoad:
    """Tests for reading snapshots."""

    def test_missing_file_has_zero_timestamp(self, snapshots):
        assert snapshots.load("examplewiki") == {"timestamp": 0}
        assert snapshots.timestamp("examplewiki") == 0

    def test_reads_existing_snapshot(self, snapshots):
        snapshots.directory.mkdir(parents=True)
        (snapshots.directory / "examplewiki.json").write_text(json.dumps({"timestamp": 42, "database": "examplewiki"}))

        assert snapshots.load("examplewiki")["database"] == "examplewiki"
        assert snapshots.timestamp("examplewiki") == 42

    def test_malformed_json_has_zero_timestamp(self, snapshots):
        snapshots.directory.mkdir(parents=True)
        (snapshots.directory / "examplewiki.json").write_text('{"timestamp": 4')

        assert snapshots.timestamp("examplewiki") == 0

    def test_non_object_json_has_zero_timestamp(self, snapshots):
        snapshots.directory.mkdir(parents=True)
        (snapshots.directory / "examplewiki.json").write_text("[1, 2, 3]")

        assert snapshots.timestamp("examplewiki") == 0

    def test_missing_timestamp_field(self, snapshots):
        snapshots.directory.mkdir(parents=True)
        (snapshots.directory / "examplewiki.json").write_text('{"database": "examplewiki"}')

        assert snapshots.timestamp("examplewiki") == 0

    @override_settings(FARM_CACHE_DIRECTORY="/srv/farm-cache")
    def test_directory_defaults_to_settings(self):
        store = SnapshotStore()
        assert str(store.path_for("examplewiki")) == "/srv/farm-cache/examplewiki.json"


class TestWrite:
    """Tests for atomic snapshot writes."""

    def test_creates_directory_and_file(self, snapshots):
        assert snapshots.write("examplewiki", {"timestamp": 10}) is True

        assert snapshots.exists("examplewiki")
        assert json.loads(snapshots.path_for("examplewiki").read_text()) == {"timestamp": 10}

    def test_leaves_no_temporary_files(self, snapshots):
        snapshots.write("examplewiki", {"timestamp": 10})
        snapshots.write("examplewiki", {"timestamp": 20})

        assert [p.name for p in snapshots.directory.iterdir()] == ["examplewiki.json"]

    def test_snapshot_is_world_readable(self, snapshots):
        snapshots.write("examplewiki", {"timestamp": 10})

        assert snapshots.path_for("examplewiki").stat().st_mode & 0o777 == 0o644

    def test_replaces_existing_snapshot(self, snapshots):
        snapshots.write("examplewiki", {"timestamp": 10})
        snapshots.write("examplewiki", {"timestamp": 20})

        assert snapshots.timestamp("examplewiki") == 20

    def test_failed_write_keeps_previous_snapshot(self, snapshots):
        """A failure before the rename leaves the old file untouched."""
        snapshots.write("examplewiki", {"timestamp": 10})

        with patch("farm.services.snapshots.os.fsync", side_effect=OSError("disk full")):
            assert snapshots.write("examplewiki", {"timestamp": 20}) is False

        assert snapshots.timestamp("examplewiki") == 10
        assert [p.name for p in snapshots.directory.iterdir()] == ["examplewiki.json"]

    def test_failed_rename_keeps_previous_snapshot(self, snapshots):
        snapshots.write("examplewiki", {"timestamp": 10})

        with patch("farm.services.snapshots.os.replace", side_effect=OSError("permission denied")):
            assert snapshots.write("examplewiki", {"timestamp": 20}) is False

        assert snapshots.timestamp("examplewiki") == 10
        assert [p.name for p in snapshots.directory.iterdir()] == ["examplewiki.json"]

    def test_unserializable_payload_not_written(self, snapshots):
        assert snapshots.write("examplewiki", {"timestamp": 10, "bad": object()}) is False
        assert not snapshots.exists("examplewiki")

    def test_readers_never_see_partial_file(self, snapshots):
        """The target file holds either the old or the new document, never a mix."""
        snapshots.write("examplewiki", {"timestamp": 10, "padding": "x" * 10000})
        seen = []

        real_fsync = os.fsync

        def fsync_and_read(fd):
            real_fsync(fd)
            # Mid-write: the target still holds the previous complete document
            seen.append(json.loads(snapshots.path_for("examplewiki").read_text()))

        with patch("farm.services.snapshots.os.fsync", side_effect=fsync_and_read):
            assert snapshots.write("examplewiki", {"timestamp": 20, "padding": "y" * 10000}) is True

        assert seen[0]["timestamp"] == 10
        assert snapshots.timestamp("examplewiki") == 20
