"""
URL configuration for Labman API tests.

Used as ROOT_URLCONF in test settings via @pytest.mark.urls.
"""

from django.urls import include, path

urlpatterns = [
    path("api/labman/", include("labman.api.urls")),
]
