from .fetch import FetchReport, YearlyFetcher, YearOutcome
from .reservoir import ReservoirService

__all__ = ["FetchReport", "ReservoirService", "YearOutcome", "YearlyFetcher"]
