"""
Timeout and retry policy shared by every remote call.

Transport failures and HTTP 429/5xx responses are retried with exponential
backoff; any other response is handed back to the caller untouched.
"""

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from iffl_companion.config import Settings

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class TransientHTTPError(Exception):
    """A response worth retrying."""

    def __init__(self, response: httpx.Response):
        self.response = response
        super().__init__(
            f"HTTP {response.status_code} from {response.request.method} {response.request.url}"
        )


def is_transient(exc: BaseException) -> bool:
    return isinstance(exc, (httpx.TransportError, TransientHTTPError))


def build_retrying(settings: Settings) -> AsyncRetrying:
    """Bounded retry with exponential backoff, configured from settings."""
    return AsyncRetrying(
        stop=stop_after_attempt(max(1, settings.retry_attempts)),
        wait=wait_exponential(
            multiplier=1,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        retry=retry_if_exception(is_transient),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    settings: Settings,
    **kwargs: Any,
) -> httpx.Response:
    """
    Send a request, retrying transient failures.

    Raises:
        httpx.TransportError: network failure on the final attempt
        TransientHTTPError: 429/5xx on the final attempt
    """
    async for attempt in build_retrying(settings):
        with attempt:
            response = await client.request(method, url, **kwargs)
            if response.status_code in TRANSIENT_STATUS_CODES:
                raise TransientHTTPError(response)
    return response
