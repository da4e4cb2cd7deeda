"""HTTP client with bounded retry, linear backoff, and failure classification."""

from __future__ import annotations

import logging
import time
from typing import Any

import requests
from fake_useragent import UserAgent

from .config import Config
from .errors import (
    FetchError,
    MalformedResponseError,
    NotFoundError,
    RateLimitedError,
    TransportError,
)

logger = logging.getLogger(__name__)


class HTTPClient:
    """HTTP client wrapping requests for the SmartStore JSON endpoints.

    Features:
    - Up to ``config.max_retries`` attempts on any failure
    - Linear backoff between attempts (``backoff_base_seconds * attempt``)
    - Random browser User-Agent with a fixed fallback
    - Typed failures: 404 → NotFoundError, 429 → RateLimitedError,
      everything else → TransportError
    """

    DEFAULT_HEADERS = {
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
    }

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self._session = requests.Session()
        self._ua = UserAgent(fallback=self.config.user_agent)

    def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> requests.Response:
        """Send a GET request, retrying on any failure.

        Args:
            url: Target URL (query string included).
            headers: Extra headers (merged over the defaults).
            timeout: Per-request timeout in seconds; config default if None.

        Returns:
            requests.Response with a 2xx status.

        Raises:
            FetchError: A NotFoundError, RateLimitedError or TransportError
                carrying the last underlying exception, once every attempt
                has failed.
        """
        merged_headers = {"User-Agent": self._ua.random, **self.DEFAULT_HEADERS}
        if headers:
            merged_headers.update(headers)

        max_attempts = self.config.max_retries
        last_exc: requests.RequestException | None = None
        for attempt in range(1, max_attempts + 1):
            try:
                resp = self._session.get(
                    url,
                    headers=merged_headers,
                    timeout=timeout or self.config.request_timeout,
                )
                resp.raise_for_status()
                return resp

            except requests.RequestException as exc:
                last_exc = exc
                if attempt == max_attempts:
                    logger.warning(
                        "Request failed (attempt %d/%d): %s; giving up",
                        attempt,
                        max_attempts,
                        exc,
                    )
                    break

                wait_time = self.config.backoff_base_seconds * attempt
                logger.warning(
                    "Request failed (attempt %d/%d): %s; retrying in %.1fs",
                    attempt,
                    max_attempts,
                    exc,
                    wait_time,
                )
                time.sleep(wait_time)

        raise self._classify(url, last_exc) from last_exc

    def get_json(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """GET and decode a JSON body.

        Raises:
            FetchError: See ``get``.
            MalformedResponseError: The body is not valid JSON.
        """
        resp = self.get(url, headers=headers, timeout=timeout)
        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponseError(f"invalid JSON from {url}: {exc}") from exc

    @staticmethod
    def _classify(url: str, exc: requests.RequestException | None) -> FetchError:
        """Map the last requests exception onto the error taxonomy."""
        response = getattr(exc, "response", None)
        status = response.status_code if response is not None else None
        if status == 404:
            return NotFoundError(url, exc)
        if status == 429:
            return RateLimitedError(url, exc)
        return TransportError(url, exc)

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
