"""Management command to fetch reservoir levels using the same stack as the API."""
from __future__ import annotations

import json
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from backend.api.views import _serialize_series, get_reservoir_service
from reservoirs.pipeline import PipelineError


class Command(BaseCommand):
    help = "Fetch the weekly reservoir series for the last N years and print it as JSON"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--years", type=int, default=1, help="Historical depth in years")
        parser.add_argument("--refresh", action="store_true", help="Bypass the in-memory cache")
        parser.add_argument("--progress", action="store_true", help="Report fetch progress on stderr")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        years_back = options["years"]
        if not 1 <= years_back <= settings.RESERVOIR_MAX_YEARS:
            raise CommandError(f"--years must be between 1 and {settings.RESERVOIR_MAX_YEARS}")

        on_progress = None
        if options.get("progress"):
            on_progress = lambda value: self.stderr.write(f"Fetching data: {value}%")  # noqa: E731

        try:
            series = get_reservoir_service().get_series(
                years_back, on_progress=on_progress, force_refresh=options.get("refresh", False)
            )
        except PipelineError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(json.dumps(_serialize_series(years_back, series)))
