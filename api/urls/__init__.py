"""
API URLs configuration.

Main API URL patterns that include all sub-modules.
"""

from django.urls import include, path

app_name = "api"

urlpatterns = [
    # Campaign membership endpoints
    path("campaigns/", include("api.urls.campaign_urls", namespace="campaigns")),
]
