"""REST API views for reservoir levels."""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict
from zoneinfo import ZoneInfo

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from reservoirs.entities import ReservoirSeries
from reservoirs.pipeline import NoDataError, PipelineError
from reservoirs.providers.base import RequestConfig
from reservoirs.providers.savings import SavingsProvider
from reservoirs.services.fetch import YearlyFetcher
from reservoirs.services.reservoir import ReservoirService


TRUTHY = {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def get_reservoir_service() -> ReservoirService:
    provider = SavingsProvider(
        base_url=settings.RESERVOIR_API_BASE,
        request_config=RequestConfig(timeout=settings.RESERVOIR_REQUEST_TIMEOUT),
    )
    return ReservoirService(
        YearlyFetcher(provider, max_workers=settings.RESERVOIR_MAX_YEARS),
        tz=ZoneInfo(settings.RESERVOIR_TIMEZONE),
    )


def _serialize_series(years_back: int, series: ReservoirSeries) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"years": years_back}
    payload.update(series.as_dict())
    return payload


def _error_payload(exc: PipelineError) -> Dict[str, str]:
    return {"detail": str(exc), "code": exc.code}


class ReservoirSeriesView(APIView):
    """Weekly reservoir levels for the last ``years`` years."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Return the weekly series, its latest point and summary."""
        raw_years = request.query_params.get("years", "1")
        try:
            years_back = int(raw_years)
        except ValueError:
            return Response({"detail": "years must be an integer"}, status=status.HTTP_400_BAD_REQUEST)
        if not 1 <= years_back <= settings.RESERVOIR_MAX_YEARS:
            return Response(
                {"detail": f"years must be between 1 and {settings.RESERVOIR_MAX_YEARS}"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        force_refresh = request.query_params.get("refresh", "").lower() in TRUTHY

        try:
            series = get_reservoir_service().get_series(years_back, force_refresh=force_refresh)
        except NoDataError as exc:
            return Response(_error_payload(exc), status=status.HTTP_503_SERVICE_UNAVAILABLE)
        except PipelineError as exc:
            return Response(_error_payload(exc), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(_serialize_series(years_back, series), status=status.HTTP_200_OK)


class ReservoirProgressView(APIView):
    """Progress of the most recent series request, for the loading indicator."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        return Response({"progress": get_reservoir_service().progress}, status=status.HTTP_200_OK)
