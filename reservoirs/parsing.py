"""Turn raw API records into :class:`Observation` instances.

Upstream records are loosely shaped: the date sits under ``date`` or ``Date``
in either ``YYYY-MM-DD`` or ``DD-MM-YYYY`` form (with ``/`` or ``-``), and each
reservoir's reading may use one of several spellings. Records without a usable
date are rejected; missing readings become ``0``.
"""
from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime, time, tzinfo
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .entities import RESERVOIRS, Observation


logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})", re.ASCII)
_DAY_FIRST_DATE = re.compile(r"(\d{1,2})-(\d{1,2})-(\d{4})", re.ASCII)
# Leading numeric prefix, the way browsers read "12.5 m3" as 12.5.
_NUMBER_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER_PREFIX.match(value)
        if not match:
            return None
        number = float(match.group(1))
    else:
        return None
    if math.isnan(number) or math.isinf(number) or number < 0:
        return None
    return number


def extract_value(record: Mapping[str, Any], keys: Sequence[str]) -> float:
    """Return the first valid reading found under ``keys``, or ``0``.

    Keys are tried in order. Absent, ``None`` and empty-string values are
    skipped, as are values that do not parse to a non-negative number.
    """
    for key in keys:
        value = record.get(key)
        if value is None or value == "":
            continue
        number = _to_float(value)
        if number is not None:
            return number
    return 0.0


def parse_date(value: str) -> Optional[date]:
    normalized = value.replace("/", "-")
    for pattern, order in ((_ISO_DATE, (0, 1, 2)), (_DAY_FIRST_DATE, (2, 1, 0))):
        match = pattern.fullmatch(normalized)
        if not match:
            continue
        parts = match.groups()
        try:
            return date(int(parts[order[0]]), int(parts[order[1]]), int(parts[order[2]]))
        except ValueError:
            continue
    return None


def midnight_millis(day: date, tz: Optional[tzinfo] = None) -> int:
    """Milliseconds since the epoch at midnight of ``day``.

    Without ``tz`` the host's local time zone applies.
    """
    moment = datetime.combine(day, time.min, tzinfo=tz)
    return int(round(moment.timestamp() * 1000))


def parse_record(record: Any, tz: Optional[tzinfo] = None) -> Optional[Observation]:
    """Normalize one raw record, returning ``None`` when it must be dropped."""
    if not isinstance(record, Mapping):
        return None
    raw_date = record.get("date") or record.get("Date")
    if not raw_date or not isinstance(raw_date, str):
        return None
    day = parse_date(raw_date)
    if day is None:
        return None
    readings = {reservoir.key: extract_value(record, reservoir.aliases) for reservoir in RESERVOIRS}
    return Observation(observed_on=day, timestamp_ms=midnight_millis(day, tz), readings=readings)


def parse_records(records: Iterable[Any], tz: Optional[tzinfo] = None) -> List[Observation]:
    observations: List[Observation] = []
    rejected = 0
    for record in records:
        observation = parse_record(record, tz)
        if observation is None:
            rejected += 1
            logger.debug("Dropping record without a usable date: %r", record)
            continue
        observations.append(observation)
    if rejected:
        logger.info("Dropped %d of %d records", rejected, rejected + len(observations))
    return observations


__all__ = ["extract_value", "midnight_millis", "parse_date", "parse_record", "parse_records"]
