"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from backend.api.views import ReservoirProgressView, ReservoirSeriesView

urlpatterns = [
    path("reservoirs", ReservoirSeriesView.as_view(), name="reservoirs"),
    path("reservoirs/progress", ReservoirProgressView.as_view(), name="reservoirs-progress"),
]
