"""Raw records in, weekly series out."""
from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any, Iterable, Optional

from .entities import ReservoirSeries
from .filling import forward_fill
from .parsing import parse_records
from .sampling import sample_weekly


logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data returned from API. Please try again later."
PROCESSING_ERROR_MESSAGE = "An unexpected error occurred while processing data."


class PipelineError(RuntimeError):
    """Base error for failures the caller is expected to show to the user."""

    code = "pipeline_error"


class NoDataError(PipelineError):
    """Raised when processing leaves nothing to chart."""

    code = "no_data"

    def __init__(self, message: str = NO_DATA_MESSAGE) -> None:
        super().__init__(message)


class ProcessingError(PipelineError):
    """Raised when our own processing fails unexpectedly."""

    code = "processing_error"

    def __init__(self, message: str = PROCESSING_ERROR_MESSAGE) -> None:
        super().__init__(message)


def build_series(records: Iterable[Any], tz: Optional[tzinfo] = None) -> ReservoirSeries:
    observations = parse_records(records, tz)
    # sorted() is stable: same-day records keep their arrival order
    observations = sorted(observations, key=lambda observation: observation.timestamp_ms)
    points = sample_weekly(forward_fill(observations))
    if not points:
        raise NoDataError()
    logger.debug("Built %d weekly points from %d observations", len(points), len(observations))
    return ReservoirSeries(points=tuple(points))


__all__ = [
    "NO_DATA_MESSAGE",
    "NoDataError",
    "PROCESSING_ERROR_MESSAGE",
    "PipelineError",
    "ProcessingError",
    "build_series",
]
