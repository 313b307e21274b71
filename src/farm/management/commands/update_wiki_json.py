"""Regenerate stale JSON snapshots for a wiki."""

from django.core.management.base import BaseCommand, CommandError

from farm.services.snapshots import InvalidSnapshotNameError
from farm.services.wiki_json import WikiJson, WikiNotFound


class Command(BaseCommand):
    help = "Regenerate stale JSON snapshots for a wiki and the database lists"

    def add_arguments(self, parser):
        parser.add_argument("wiki", help="Database name of the wiki")
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Invalidate the wiki snapshot before updating",
        )
        parser.add_argument(
            "--reset-databases",
            action="store_true",
            help="Invalidate the database lists before updating",
        )

    def handle(self, *args, **options):
        wiki = options["wiki"]

        try:
            wiki_json = WikiJson(wiki)
        except InvalidSnapshotNameError as e:
            raise CommandError(str(e)) from e

        if options["reset"]:
            wiki_json.reset_wiki()
        if options["reset_databases"]:
            wiki_json.reset_database_list()

        try:
            changes = wiki_json.update()
        except WikiNotFound as e:
            raise CommandError(str(e)) from e

        if not changes.databases and not changes.wiki:
            self.stdout.write("Snapshots are up to date")
            return

        if changes.databases:
            self.stdout.write(self.style.SUCCESS("Regenerated database lists"))
        if changes.wiki:
            self.stdout.write(self.style.SUCCESS(f"Regenerated {wiki}.json"))
