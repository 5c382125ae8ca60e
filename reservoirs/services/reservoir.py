"""Reservoir service that ties fetching, processing and caching together."""
from __future__ import annotations

import logging
from datetime import tzinfo
from threading import Lock
from typing import Dict, Optional

from ..cache import SeriesCache
from ..entities import ReservoirSeries
from ..pipeline import NoDataError, ProcessingError, build_series
from .fetch import ProgressCallback, YearlyFetcher


class ReservoirService:
    """Serve weekly reservoir series for a requested depth in years.

    Every call to :meth:`get_series` is an invocation. When a newer invocation
    starts, older ones still return to their own callers, but they stop
    driving :attr:`progress` and may not overwrite the cache entry of a newer
    fetching invocation for the same depth. Cache hits never take over a
    depth, so a refresh in flight still stores its result.
    """

    def __init__(
        self,
        fetcher: YearlyFetcher,
        cache: Optional[SeriesCache] = None,
        *,
        tz: Optional[tzinfo] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.fetcher = fetcher
        self.cache = cache if cache is not None else SeriesCache()
        self.tz = tz
        self._log = logger or logging.getLogger(self.__class__.__name__)
        self._lock = Lock()
        self._latest_token = 0
        self._owners: Dict[int, int] = {}
        self._progress = 0

    @property
    def progress(self) -> int:
        """Progress of the most recent invocation, in percent."""
        return self._progress

    # Public API ---------------------------------------------------------
    def get_series(
        self,
        years_back: int,
        on_progress: Optional[ProgressCallback] = None,
        force_refresh: bool = False,
    ) -> ReservoirSeries:
        if years_back < 1:
            raise ValueError("years_back must be at least 1")
        token = self._begin()
        report_progress = self._progress_reporter(token, on_progress)

        if not force_refresh:
            cached = self.cache.get(years_back)
            if cached is not None:
                self._log.debug("Cache hit for %d year(s)", years_back)
                report_progress(100)
                return cached

        self._claim(years_back, token)
        report_progress(0)
        try:
            report = self.fetcher.fetch(years_back, report_progress)
            series = build_series(report.records, self.tz)
        except NoDataError:
            self._log.warning("No reservoir data for the last %d year(s)", years_back)
            raise
        except Exception as exc:
            self._log.error("Failed to process reservoir data", exc_info=exc)
            raise ProcessingError() from exc

        if self._store(years_back, token, series):
            self._log.info(
                "Loaded %d weekly points for %d year(s) (%s)", len(series), years_back, series.date_range_label
            )
        return series

    # Helpers ------------------------------------------------------------
    def _begin(self) -> int:
        with self._lock:
            self._latest_token += 1
            return self._latest_token

    def _claim(self, years_back: int, token: int) -> None:
        # only fetching invocations own a depth; cache hits never write
        with self._lock:
            self._owners[years_back] = token

    def _progress_reporter(self, token: int, callback: Optional[ProgressCallback]) -> ProgressCallback:
        def report(value: int) -> None:
            with self._lock:
                if token == self._latest_token:
                    self._progress = value
            if callback is not None:
                callback(value)

        return report

    def _store(self, years_back: int, token: int, series: ReservoirSeries) -> bool:
        with self._lock:
            if self._owners.get(years_back) != token:
                self._log.info("Discarding superseded result for %d year(s)", years_back)
                return False
            self.cache.set(years_back, series)
            return True


__all__ = ["ReservoirService"]
