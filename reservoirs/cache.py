from __future__ import annotations

from threading import Lock
from typing import Dict, Optional

from .entities import ReservoirSeries


class SeriesCache:
    """Processed series keyed by requested depth in years.

    Entries live until they are invalidated or overwritten; there is no expiry.
    """

    def __init__(self) -> None:
        self._storage: Dict[int, ReservoirSeries] = {}
        self._lock = Lock()

    def get(self, years_back: int) -> Optional[ReservoirSeries]:
        with self._lock:
            return self._storage.get(years_back)

    def set(self, years_back: int, series: ReservoirSeries) -> None:
        with self._lock:
            self._storage[years_back] = series

    def invalidate(self, years_back: int) -> None:
        with self._lock:
            self._storage.pop(years_back, None)

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()

    def __contains__(self, years_back: object) -> bool:
        with self._lock:
            return years_back in self._storage

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)


__all__ = ["SeriesCache"]
