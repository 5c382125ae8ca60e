from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Reservoir:
    """A tracked reservoir and the field names it may appear under."""

    key: str
    label: str
    aliases: Tuple[str, ...]


RESERVOIRS: Tuple[Reservoir, ...] = (
    Reservoir("Mornos", "Mornos", ("Mornos", "mornos")),
    Reservoir("Eyinos", "Evinos", ("Eyinos", "eyinos", "Evinos", "evinos")),
    Reservoir("Yliko", "Yliki", ("Yliko", "yliko", "Yliki", "yliki")),
    Reservoir("Marathonas", "Marathonas", ("Marathonas", "marathonas", "Marathon", "marathon")),
)

RESERVOIR_KEYS: Tuple[str, ...] = tuple(reservoir.key for reservoir in RESERVOIRS)

# English labels regardless of the process locale
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
DAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def month_year_label(day: date) -> str:
    return f"{MONTH_ABBR[day.month - 1]} {day.year}"


def long_date_label(day: date) -> str:
    """E.g. ``Fri, Jan 5, 2024``."""
    return f"{DAY_ABBR[day.weekday()]}, {MONTH_ABBR[day.month - 1]} {day.day}, {day.year}"


def _check_readings(readings: Mapping[str, float]) -> Dict[str, float]:
    if set(readings) != set(RESERVOIR_KEYS):
        raise ValueError(f"readings must contain exactly {RESERVOIR_KEYS}, got {tuple(readings)}")
    return {key: float(readings[key]) for key in RESERVOIR_KEYS}


@dataclass(frozen=True)
class Observation:
    """One dated set of readings, in cubic metres.

    ``timestamp_ms`` is local midnight of ``observed_on``. ``readings`` always
    carries every reservoir key; a missing reading is stored as ``0``.
    """

    observed_on: date
    timestamp_ms: int
    readings: Mapping[str, float]

    def __post_init__(self) -> None:
        object.__setattr__(self, "readings", _check_readings(self.readings))

    def with_readings(self, readings: Mapping[str, float]) -> "Observation":
        return Observation(observed_on=self.observed_on, timestamp_ms=self.timestamp_ms, readings=readings)


@dataclass(frozen=True)
class SampledPoint:
    observed_on: date
    timestamp_ms: int
    readings: Mapping[str, float]
    total: float = field(init=False)

    def __post_init__(self) -> None:
        readings = _check_readings(self.readings)
        object.__setattr__(self, "readings", readings)
        object.__setattr__(self, "total", sum(readings[key] for key in RESERVOIR_KEYS))

    @classmethod
    def from_observation(cls, observation: Observation) -> "SampledPoint":
        return cls(
            observed_on=observation.observed_on,
            timestamp_ms=observation.timestamp_ms,
            readings=observation.readings,
        )

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"timestamp": self.timestamp_ms}
        payload.update(self.readings)
        payload["total"] = self.total
        return payload


@dataclass(frozen=True)
class ReservoirSeries:
    """Weekly series handed to the dashboard.

    Points are in ascending timestamp order with at most one point per day.
    A series produced by the pipeline is never empty.
    """

    points: Tuple[SampledPoint, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]

    @property
    def latest(self) -> Optional[SampledPoint]:
        return self.points[-1] if self.points else None

    @property
    def date_range_label(self) -> str:
        if not self.points:
            return ""
        start = month_year_label(self.points[0].observed_on)
        end = month_year_label(self.points[-1].observed_on)
        return f"{start} - {end}"

    def summary(self) -> Optional[Dict[str, Any]]:
        """Latest reading per reservoir, as shown in the stats grid."""
        latest = self.latest
        if latest is None:
            return None
        return {
            "date_label": long_date_label(latest.observed_on),
            "total": latest.total,
            "reservoirs": [
                {"key": reservoir.key, "label": reservoir.label, "value": latest.readings[reservoir.key]}
                for reservoir in RESERVOIRS
            ],
        }

    def as_dict(self) -> Dict[str, Any]:
        latest = self.latest
        return {
            "points": [point.as_dict() for point in self.points],
            "latest": latest.as_dict() if latest is not None else None,
            "range_label": self.date_range_label,
            "summary": self.summary(),
        }


__all__ = [
    "Observation",
    "RESERVOIRS",
    "RESERVOIR_KEYS",
    "Reservoir",
    "ReservoirSeries",
    "SampledPoint",
    "long_date_label",
    "month_year_label",
]
