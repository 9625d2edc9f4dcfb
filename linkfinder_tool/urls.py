"""Root URL configuration for the linkfinder_tool project."""

from django.urls import include, path

urlpatterns = [
    path('', include('linkfinder.urls')),
]
