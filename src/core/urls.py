"""URL configuration for wikifarm."""

from django.urls import path

from farm import views as farm_views

from . import views as core_views

urlpatterns = [
    # Health check
    path("health/", core_views.health, name="health"),
    # Snapshots
    path("wikis/<str:wiki>.json", farm_views.wiki_json, name="wiki_json"),
]
