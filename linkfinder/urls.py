"""URL configuration for the linkfinder app.

This module defines the URL patterns for the app's views. It also
specifies the ``app_name`` to allow namespacing from the project URL
configuration.
"""

from django.urls import path

from . import views

app_name = 'linkfinder'

urlpatterns = [
    path('analyze/', views.analyze, name='analyze'),
    path('tiers/', views.score_tier, name='score_tier'),
]
