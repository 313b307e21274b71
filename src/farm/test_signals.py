"""Tests for snapshot invalidation on wiki changes."""

from unittest.mock import patch

import pytest

from farm.models import Wiki
from farm.services.timestamps import DATABASES_KEY, TimestampStore


@pytest.mark.django_db
class TestWikiSignals:
    """Saving or deleting a wiki resets its invalidation timestamps."""

    def test_create_invalidates(self):
        with patch("farm.services.timestamps.current_timestamp", return_value=1000):
            Wiki.objects.create(dbname="testwiki", sitename="Test Wiki")

        store = TimestampStore()
        assert store.get("testwiki") == 1000
        assert store.get(DATABASES_KEY) == 1000

    def test_update_invalidates(self):
        with patch("farm.services.timestamps.current_timestamp", return_value=1000):
            wiki = Wiki.objects.create(dbname="testwiki", sitename="Test Wiki")

        with patch("farm.services.timestamps.current_timestamp", return_value=2000):
            wiki.sitename = "Renamed Wiki"
            wiki.save()

        assert TimestampStore().get("testwiki") == 2000

    def test_delete_invalidates(self):
        with patch("farm.services.timestamps.current_timestamp", return_value=1000):
            wiki = Wiki.objects.create(dbname="testwiki", sitename="Test Wiki")

        with patch("farm.services.timestamps.current_timestamp", return_value=3000):
            wiki.delete()

        store = TimestampStore()
        assert store.get("testwiki") == 3000
        assert store.get(DATABASES_KEY) == 3000
