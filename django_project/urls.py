"""Root URL configuration for Bebek Süt Takip."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/", include("django_project.api_urls")),
]
