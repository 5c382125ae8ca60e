from __future__ import annotations

import re

import pytest
from django.test import Client

from backend.api.views import get_reservoir_service


YEAR_URL = re.compile(r"https://savings\.test/api/Savings/Year/\d{2}-\d{2}-\d{4}")
RECORDS = [
    {"date": "2026-10-09", "Mornos": "1000", "Evinos": "50", "Yliki": "300", "Marathon": "20"},
    {"date": "2026-10-14", "Mornos": "0", "Evinos": "55", "Yliki": "300", "Marathon": "20"},
]


@pytest.fixture(autouse=True)
def _fresh_service():
    get_reservoir_service.cache_clear()
    yield
    get_reservoir_service.cache_clear()


def test_reservoirs_endpoint_returns_series(requests_mock):
    requests_mock.get(YEAR_URL, json=RECORDS)
    client = Client()

    response = client.get("/api/reservoirs", {"years": "2"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["years"] == 2
    assert [p["Mornos"] for p in payload["points"]] == [1000, 1000]
    assert [p["Eyinos"] for p in payload["points"]] == [50, 55]
    assert payload["latest"] == payload["points"][-1]
    assert payload["latest"]["total"] == 1375
    assert payload["range_label"] == "Oct 2026 - Oct 2026"
    assert payload["summary"]["date_label"] == "Wed, Oct 14, 2026"
    assert requests_mock.call_count == 2


def test_reservoirs_endpoint_uses_cache_until_refresh(requests_mock):
    requests_mock.get(YEAR_URL, json=RECORDS)
    client = Client()

    client.get("/api/reservoirs")
    client.get("/api/reservoirs")
    assert requests_mock.call_count == 1

    client.get("/api/reservoirs", {"refresh": "true"})
    assert requests_mock.call_count == 2


def test_reservoirs_endpoint_reports_no_data(requests_mock):
    requests_mock.get(YEAR_URL, status_code=500, text="server error")
    client = Client()

    response = client.get("/api/reservoirs", {"years": "1"})

    assert response.status_code == 503
    payload = response.json()
    assert payload["code"] == "no_data"
    assert "No data" in payload["detail"]


@pytest.mark.parametrize("years", ["abc", "0", "11"])
def test_reservoirs_endpoint_validates_years(years):
    client = Client()

    response = client.get("/api/reservoirs", {"years": years})

    assert response.status_code == 400
    assert "detail" in response.json()


def test_progress_endpoint(requests_mock):
    requests_mock.get(YEAR_URL, json=RECORDS)
    client = Client()

    assert client.get("/api/reservoirs/progress").json() == {"progress": 0}
    client.get("/api/reservoirs", {"years": "3"})
    assert client.get("/api/reservoirs/progress").json() == {"progress": 100}
