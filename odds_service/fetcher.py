# odds_service/fetcher.py
from typing import Optional

import httpx
import structlog
from tenacity import AsyncRetrying
from tenacity import retry_if_exception
from tenacity import stop_after_attempt
from tenacity import wait_exponential

from .core.exceptions import FetchHttpError

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "ja,en-US;q=0.8,en;q=0.6",
}


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.TransportError)


class OddsFetcher:
    """
    Retrieves raw odds pages over HTTP.
    Server errors and transport failures are retried; everything that still
    fails surfaces as a FetchHttpError.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: int = 20,
        max_attempts: int = 3,
        wait=None,
    ):
        self.http_client = http_client
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.wait = wait if wait is not None else wait_exponential(multiplier=1, min=2, max=10)
        self.logger = structlog.get_logger(__name__)
        self._owns_client = http_client is None

    async def fetch_html(self, url: str) -> str:
        response = await self.make_request("GET", url, headers=DEFAULT_HEADERS)
        return response.text

    async def make_request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Makes a resilient HTTP request with built-in retry logic using tenacity."""
        client = self._get_client()
        try:
            async for attempt in AsyncRetrying(
                wait=self.wait,
                stop=stop_after_attempt(self.max_attempts),
                retry=retry_if_exception(_is_retryable),
                reraise=True,
            ):
                with attempt:
                    self.logger.info(
                        "Making request",
                        method=method.upper(),
                        url=url,
                        attempt=attempt.retry_state.attempt_number,
                    )
                    response = await client.request(method, url, timeout=self.timeout, **kwargs)
                    response.raise_for_status()
                    return response
        except httpx.HTTPStatusError as e:
            self.logger.error(
                "HTTP Status Error during request",
                status_code=e.response.status_code,
                url=str(e.request.url),
            )
            raise FetchHttpError(status_code=e.response.status_code, url=url) from e
        except httpx.RequestError as e:
            self.logger.error("Request Error", url=url, error=str(e))
            raise FetchHttpError(status_code=503, url=url, detail=str(e)) from e

    def _get_client(self) -> httpx.AsyncClient:
        if self.http_client is None:
            self.http_client = httpx.AsyncClient(follow_redirects=True)
        return self.http_client

    async def close(self):
        if self._owns_client and self.http_client is not None:
            await self.http_client.aclose()
            self.http_client = None
