"""Weekly reservoir level series built from the water utility's open data."""
from __future__ import annotations

from .cache import SeriesCache
from .entities import RESERVOIRS, Observation, Reservoir, ReservoirSeries, SampledPoint
from .pipeline import NoDataError, PipelineError, ProcessingError, build_series

__all__ = [
    "NoDataError",
    "Observation",
    "PipelineError",
    "ProcessingError",
    "RESERVOIRS",
    "Reservoir",
    "ReservoirSeries",
    "SampledPoint",
    "SeriesCache",
    "build_series",
]
