from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from .base import HTTPProvider


class SavingsProvider(HTTPProvider):
    """Client for the water utility's open-data ``Savings`` endpoint.

    ``GET {base}/Year/{DD-MM-YYYY}`` returns the year of readings ending at the
    given date, either as a single object or as a list of objects.
    """

    base_url = "https://opendata-api-eydap.growthfund.gr/api/Savings"

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = (base_url or self.base_url).rstrip("/")

    def year_url(self, anchor: date) -> str:
        return f"{self.base_url}/Year/{anchor.strftime('%d-%m-%Y')}"

    def fetch_year(self, anchor: date) -> List[Dict[str, Any]]:
        response = self._request("GET", self.year_url(anchor))
        data = self._json(response)
        if isinstance(data, list):
            return data
        return [data]


__all__ = ["SavingsProvider"]
