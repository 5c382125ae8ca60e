from .base import HTTPProvider, ProviderError, RequestConfig
from .savings import SavingsProvider

__all__ = ["HTTPProvider", "ProviderError", "RequestConfig", "SavingsProvider"]
