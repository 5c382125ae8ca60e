from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests import Response


logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """Base provider error."""


@dataclass
class RequestConfig:
    timeout: float = 10.0


class HTTPProvider:
    """Base class for single-attempt JSON HTTP providers."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    def _handle_response(self, response: Response) -> Response:
        if not 200 <= response.status_code < 300:
            self._log.warning("Provider returned %s for %s", response.status_code, response.url)
            raise ProviderError(f"HTTP {response.status_code}")
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.warning("Request to %s timed out", url)
            raise ProviderError("timeout") from exc
        except requests.RequestException as exc:
            self._log.warning("Request to %s failed: %s", url, exc)
            raise ProviderError("request failed") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self._log.warning("Failed to decode JSON from %s", response.url)
            raise ProviderError("invalid json") from exc


__all__ = ["HTTPProvider", "ProviderError", "RequestConfig"]
