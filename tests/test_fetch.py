from __future__ import annotations

import re
import threading
from datetime import date

import pytest

from reservoirs.providers.base import ProviderError
from reservoirs.providers.savings import SavingsProvider
from reservoirs.services.fetch import ProgressCounter, YearlyFetcher, percent, years_before


TODAY = date(2026, 10, 19)


class RecordingProvider:
    def __init__(self, failing: tuple = (), raising: tuple = ()) -> None:
        self.failing = set(failing)
        self.raising = set(raising)
        self.anchors: list[date] = []
        self._lock = threading.Lock()

    def fetch_year(self, anchor: date):
        with self._lock:
            self.anchors.append(anchor)
        if anchor.year in self.failing:
            raise ProviderError("HTTP 500")
        if anchor.year in self.raising:
            raise KeyError("unexpected")
        if anchor.year == 2025:
            return [{"date": f"{anchor.year}-01-03"}, {"date": f"{anchor.year}-01-10"}]
        return [{"date": f"{anchor.year}-01-03"}]


def test_years_before_handles_leap_day():
    assert years_before(date(2024, 2, 29), 1) == date(2023, 2, 28)
    assert years_before(date(2024, 2, 29), 4) == date(2020, 2, 29)
    assert years_before(TODAY, 0) == TODAY


@pytest.mark.parametrize(
    "done, total, expected",
    [
        (0, 3, 0),
        (1, 3, 33),
        (2, 3, 67),
        (3, 3, 100),
        (1, 8, 13),
        (199, 200, 99),
        (200, 200, 100),
    ],
)
def test_percent_rounds_half_up(done, total, expected):
    assert percent(done, total) == expected


def test_fetch_requests_one_anchor_per_year():
    provider = RecordingProvider()
    fetcher = YearlyFetcher(provider, today_func=lambda: TODAY)

    report = fetcher.fetch(3)

    assert sorted(provider.anchors) == [date(2024, 10, 19), date(2025, 10, 19), date(2026, 10, 19)]
    assert [outcome.offset for outcome in report.outcomes] == [0, 1, 2]
    assert report.records == [
        {"date": "2026-01-03"},
        {"date": "2025-01-03"},
        {"date": "2025-01-10"},
        {"date": "2024-01-03"},
    ]


def test_fetch_tolerates_partial_failures():
    provider = RecordingProvider(failing=(2025,), raising=(2024,))
    fetcher = YearlyFetcher(provider, today_func=lambda: TODAY)

    report = fetcher.fetch(4)

    assert report.records == [{"date": "2026-01-03"}, {"date": "2023-01-03"}]
    assert [outcome.anchor.year for outcome in report.failures] == [2025, 2024]
    assert isinstance(report.failures[0].error, ProviderError)


def test_progress_reaches_100_once_all_requests_settle():
    values: list[int] = []
    fetcher = YearlyFetcher(RecordingProvider(failing=(2024,)), today_func=lambda: TODAY)

    fetcher.fetch(3, values.append)

    assert values == [33, 67, 100]


def test_progress_with_bounded_workers():
    values: list[int] = []
    fetcher = YearlyFetcher(RecordingProvider(), max_workers=2, today_func=lambda: TODAY)

    report = fetcher.fetch(5, values.append)

    assert values == [20, 40, 60, 80, 100]
    assert len(report.outcomes) == 5


def test_zero_years_reports_completion_without_requests():
    provider = RecordingProvider()
    values: list[int] = []

    report = YearlyFetcher(provider, today_func=lambda: TODAY).fetch(0, values.append)

    assert report.records == []
    assert provider.anchors == []
    assert values == [100]


def test_progress_counter_is_safe_across_threads():
    values: list[int] = []
    counter = ProgressCounter(200, values.append)
    threads = [threading.Thread(target=counter.advance) for _ in range(200)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert counter.done == 200
    assert values == sorted(values)
    assert values[-1] == 100
    assert values.count(100) == 1
    assert values[-2] == 99


def test_fetch_with_http_provider(requests_mock):
    provider = SavingsProvider(base_url="https://savings.test/api/Savings")
    requests_mock.get("https://savings.test/api/Savings/Year/19-10-2026", json=[{"date": "2026-10-16"}])
    requests_mock.get("https://savings.test/api/Savings/Year/19-10-2025", status_code=404)
    requests_mock.get(re.compile(r"https://savings\.test/api/Savings/Year/19-10-2024"), json={"date": "2024-10-18"})

    report = YearlyFetcher(provider, today_func=lambda: TODAY).fetch(3)

    assert requests_mock.call_count == 3
    assert report.records == [{"date": "2026-10-16"}, {"date": "2024-10-18"}]
    assert len(report.failures) == 1
