"""Views for serving wiki JSON snapshots."""

import logging

from django.conf import settings
from django.http import HttpResponse, HttpResponseNotFound, JsonResponse
from django.views.decorators.http import require_GET

from .models import Wiki
from .services.snapshots import InvalidSnapshotNameError
from .services.wiki_json import WikiJson, WikiNotFound

logger = logging.getLogger(__name__)


@require_GET
def wiki_json(request, wiki: str):
    """Serve a wiki's JSON snapshot, regenerating it first if stale."""
    # Checked before WikiJson seeds timestamps for the name
    if not Wiki.objects.using(settings.FARM_DATABASE).filter(dbname=wiki).exists():
        logger.warning("JSON requested for unknown wiki %s", wiki)
        return HttpResponseNotFound("Wiki not found")

    try:
        snapshot = WikiJson(wiki)
    except InvalidSnapshotNameError:
        return HttpResponseNotFound("Invalid wiki name")

    try:
        snapshot.update()
    except WikiNotFound:
        logger.warning("Wiki %s disappeared during regeneration", wiki)
        return HttpResponseNotFound("Wiki not found")

    if not snapshot.snapshots.exists(wiki):
        logger.error("No JSON snapshot available for %s", wiki)
        return HttpResponse("Snapshot unavailable", status=503)

    return JsonResponse(snapshot.snapshots.load(wiki))
