from __future__ import annotations

from typing import Dict, Iterable, List

from .entities import RESERVOIR_KEYS, Observation


def forward_fill(observations: Iterable[Observation]) -> List[Observation]:
    """Replace zero readings with the last positive reading of the same reservoir.

    Input must already be in chronological order. A reading stays ``0`` only
    while no positive value has been seen for that reservoir.
    """
    last_known: Dict[str, float] = {key: 0.0 for key in RESERVOIR_KEYS}
    filled: List[Observation] = []
    for observation in observations:
        readings = {}
        for key in RESERVOIR_KEYS:
            value = observation.readings[key]
            if value > 0:
                last_known[key] = value
            readings[key] = value if value > 0 else last_known[key]
        filled.append(observation.with_readings(readings))
    return filled


__all__ = ["forward_fill"]
