"""Fan out one request per year and collect whatever comes back."""
from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from threading import Lock
from typing import Any, Callable, List, Optional, Protocol, Tuple

from ..providers.base import ProviderError


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class YearProvider(Protocol):
    def fetch_year(self, anchor: date) -> List[Any]:
        """Return the raw records of the year ending at ``anchor``."""
        ...


def years_before(day: date, years: int) -> date:
    """``day`` moved back by whole years; 29 February becomes 28 February."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


def percent(done: int, total: int) -> int:
    if total <= 0 or done >= total:
        return 100
    # 100 is reserved for completion, however close rounding gets
    return min(99, int(math.floor(done * 100 / total + 0.5)))


@dataclass(frozen=True)
class YearOutcome:
    """Result of one yearly request: records on success, the error otherwise."""

    offset: int
    anchor: date
    records: Tuple[Any, ...] = ()
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class FetchReport:
    years_back: int
    outcomes: Tuple[YearOutcome, ...] = field(default_factory=tuple)

    @property
    def records(self) -> List[Any]:
        aggregate: List[Any] = []
        for outcome in self.outcomes:
            aggregate.extend(outcome.records)
        return aggregate

    @property
    def failures(self) -> List[YearOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


class ProgressCounter:
    """Thread-safe completion counter reporting whole percentages."""

    def __init__(self, total: int, callback: Optional[ProgressCallback] = None) -> None:
        self.total = total
        self._callback = callback
        self._done = 0
        self._lock = Lock()

    @property
    def done(self) -> int:
        return self._done

    def advance(self) -> int:
        # the callback runs under the lock so reports can never arrive out of order
        with self._lock:
            self._done += 1
            value = percent(self._done, self.total)
            if self._callback is not None:
                self._callback(value)
            return value


class YearlyFetcher:
    """Issue ``years_back`` independent requests, one per year offset.

    A failed request contributes no records and never aborts its siblings.
    """

    def __init__(
        self,
        provider: YearProvider,
        *,
        max_workers: Optional[int] = None,
        today_func: Callable[[], date] = date.today,
    ) -> None:
        self.provider = provider
        self.max_workers = max_workers
        self._today_func = today_func
        self._log = logging.getLogger(self.__class__.__name__)

    def anchors(self, years_back: int) -> List[date]:
        today = self._today_func()
        return [years_before(today, offset) for offset in range(years_back)]

    def fetch(self, years_back: int, on_progress: Optional[ProgressCallback] = None) -> FetchReport:
        anchors = self.anchors(years_back)
        if not anchors:
            if on_progress is not None:
                on_progress(100)
            return FetchReport(years_back=years_back)

        progress = ProgressCounter(len(anchors), on_progress)
        workers = min(len(anchors), self.max_workers or len(anchors))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="year-fetch") as executor:
            futures = [
                executor.submit(self._fetch_one, offset, anchor, progress)
                for offset, anchor in enumerate(anchors)
            ]
            outcomes = tuple(future.result() for future in futures)

        failed = sum(1 for outcome in outcomes if not outcome.ok)
        if failed:
            self._log.warning("%d of %d yearly requests failed", failed, len(outcomes))
        return FetchReport(years_back=years_back, outcomes=outcomes)

    def _fetch_one(self, offset: int, anchor: date, progress: ProgressCounter) -> YearOutcome:
        try:
            records = self.provider.fetch_year(anchor)
        except ProviderError as exc:
            self._log.warning("Failed to fetch data for year offset %d (%s): %s", offset, anchor, exc)
            return YearOutcome(offset=offset, anchor=anchor, error=exc)
        except Exception as exc:  # noqa: BLE001 - one bad year must not sink the batch
            self._log.error("Unexpected error fetching year offset %d", offset, exc_info=exc)
            return YearOutcome(offset=offset, anchor=anchor, error=exc)
        finally:
            progress.advance()
        return YearOutcome(offset=offset, anchor=anchor, records=tuple(records))


__all__ = [
    "FetchReport",
    "ProgressCallback",
    "ProgressCounter",
    "YearOutcome",
    "YearProvider",
    "YearlyFetcher",
    "percent",
    "years_before",
]
