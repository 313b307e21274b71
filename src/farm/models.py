"""Wiki farm models."""

from dataclasses import dataclass

from django.db import models

# MediaWiki style timestamps (YYYYMMDDHHMMSS)
TIMESTAMP_LENGTH = 14
DBNAME_MAX_LENGTH = 64
DBCLUSTER_MAX_LENGTH = 5
SITENAME_MAX_LENGTH = 128
LANGUAGE_MAX_LENGTH = 12
CATEGORY_MAX_LENGTH = 64
URL_MAX_LENGTH = 512


class Wiki(models.Model):
    """A wiki hosted on the farm."""

    dbname = models.CharField(max_length=DBNAME_MAX_LENGTH, primary_key=True, db_column="wiki_dbname")
    dbcluster = models.CharField(max_length=DBCLUSTER_MAX_LENGTH, null=True, blank=True, db_column="wiki_dbcluster")
    sitename = models.CharField(max_length=SITENAME_MAX_LENGTH, db_column="wiki_sitename")
    language = models.CharField(max_length=LANGUAGE_MAX_LENGTH, default="en", db_column="wiki_language")
    url = models.CharField(max_length=URL_MAX_LENGTH, null=True, blank=True, db_column="wiki_url")
    category = models.CharField(max_length=CATEGORY_MAX_LENGTH, default="uncategorised", db_column="wiki_category")
    creation = models.CharField(max_length=TIMESTAMP_LENGTH, null=True, blank=True, db_column="wiki_creation")

    # States
    deleted = models.BooleanField(default=False, db_index=True, db_column="wiki_deleted")
    private = models.BooleanField(default=False, db_column="wiki_private")
    closed_timestamp = models.CharField(
        max_length=TIMESTAMP_LENGTH, null=True, blank=True, db_column="wiki_closed_timestamp"
    )
    inactive_exempt = models.BooleanField(default=False, db_column="wiki_inactive_exempt")
    inactive_timestamp = models.CharField(
        max_length=TIMESTAMP_LENGTH, null=True, blank=True, db_column="wiki_inactive_timestamp"
    )

    class Meta:
        db_table = "cw_wikis"
        ordering = ["dbname"]

    def __str__(self):
        return self.dbname


@dataclass(frozen=True)
class WikiRecord:
    """Immutable snapshot of a single ``cw_wikis`` row."""

    dbname: str
    sitename: str
    dbcluster: str | None = None
    language: str = "en"
    url: str | None = None
    category: str = "uncategorised"
    creation: str | None = None
    deleted: bool = False
    private: bool = False
    closed_timestamp: str | None = None
    inactive_exempt: bool = False
    inactive_timestamp: str | None = None

    @classmethod
    def from_model(cls, wiki: Wiki) -> "WikiRecord":
        """Decode a ``Wiki`` row into a record."""
        return cls(
            dbname=wiki.dbname,
            sitename=wiki.sitename,
            dbcluster=wiki.dbcluster,
            language=wiki.language,
            url=wiki.url,
            category=wiki.category,
            creation=wiki.creation,
            deleted=bool(wiki.deleted),
            private=bool(wiki.private),
            closed_timestamp=wiki.closed_timestamp,
            inactive_exempt=bool(wiki.inactive_exempt),
            inactive_timestamp=wiki.inactive_timestamp,
        )

    @property
    def inactive_state(self) -> str | bool:
        """``"exempt"``, the inactive timestamp, or False."""
        if self.inactive_exempt:
            return "exempt"
        return self.inactive_timestamp if self.inactive_timestamp is not None else False
