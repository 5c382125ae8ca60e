from __future__ import annotations

import calendar
from typing import Dict, List, Sequence

from .entities import Observation, SampledPoint


WEEKLY_ANCHOR_DAY = calendar.FRIDAY


def sample_weekly(observations: Sequence[Observation]) -> List[SampledPoint]:
    """Keep Friday observations plus the most recent one.

    ``observations`` must be sorted by timestamp. When several selected
    observations share a timestamp the later one wins, and the result stays in
    ascending order.
    """
    last_index = len(observations) - 1
    selected: Dict[int, Observation] = {}
    for index, observation in enumerate(observations):
        if observation.observed_on.weekday() == WEEKLY_ANCHOR_DAY or index == last_index:
            # dicts keep first-insertion order, so a later duplicate only swaps the value
            selected[observation.timestamp_ms] = observation
    return [SampledPoint.from_observation(observation) for observation in selected.values()]


__all__ = ["WEEKLY_ANCHOR_DAY", "sample_weekly"]
