"""HTTP fetcher returning parsed listing documents.

Thin wrapper over a requests.Session: one request at a time, a fixed
per-request timeout, an optional politeness delay between requests and
exponential backoff retries for transient failures (timeouts, connection
errors, 429 and 5xx responses).
"""

import logging
import time
from typing import Optional

import requests

from salary_estimator.config.models import AdvancedConfig
from salary_estimator.logging import get_logger

from .document import ListingDocument
from .exceptions import FetchHTTPError, FetchTimeoutError, ScrapeConfigurationError, ScrapeError

logger = get_logger(__name__, component="fetcher")

MAX_BACKOFF_SECONDS = 60.0


class HttpFetcher:
    """Fetch pages over HTTP and parse them into ListingDocuments.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
        request_delay: Seconds to wait between consecutive requests
        max_retries: Retries after the first attempt for transient failures
    """

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str = "Mozilla/5.0",
        request_delay: float = 0.0,
        max_retries: int = 2,
        retry_initial_delay: float = 1.0,
        retry_backoff_multiplier: float = 2.0,
    ) -> None:
        """Initialize fetcher.

        Raises:
            ScrapeConfigurationError: If timeout is outside 5-300 seconds or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise ScrapeConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise ScrapeConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()
        self.request_delay = request_delay
        self.max_retries = max_retries
        self.retry_initial_delay = retry_initial_delay
        self.retry_backoff_multiplier = retry_backoff_multiplier

        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})
        self._last_request_at: Optional[float] = None

    @classmethod
    def from_config(cls, advanced_config: AdvancedConfig) -> "HttpFetcher":
        return cls(
            timeout=advanced_config.http_request_timeout,
            user_agent=advanced_config.user_agent,
            request_delay=advanced_config.request_delay_seconds,
            max_retries=advanced_config.max_retries,
            retry_initial_delay=advanced_config.retry_initial_delay,
            retry_backoff_multiplier=advanced_config.retry_backoff_multiplier,
        )

    def fetch(self, url: str) -> ListingDocument:
        """Fetch url and parse the body.

        Args:
            url: Absolute URL to fetch

        Returns:
            Parsed ListingDocument

        Raises:
            FetchHTTPError: On 4xx responses, or 5xx/connection errors after all retries
            FetchTimeoutError: When every attempt timed out
        """
        max_attempts = self.max_retries + 1
        last_error: Optional[ScrapeError] = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                delay = self.retry_initial_delay * (self.retry_backoff_multiplier ** (attempt - 2))
                delay = min(delay, MAX_BACKOFF_SECONDS)
                logger.info(
                    f"Retrying {url} (attempt {attempt}/{max_attempts}) after {delay:.1f}s delay",
                    extra={"event": "fetch.retry", "attempt": attempt, "url": url, "delay_seconds": delay},
                )
                time.sleep(delay)

            try:
                body = self._request(url)
                return ListingDocument.from_html(body, url=url)
            except FetchHTTPError as e:
                if not e.is_retryable:
                    raise
                last_error = e
            except FetchTimeoutError as e:
                last_error = e

            if attempt < max_attempts:
                logger.warning(
                    f"Transient fetch failure for {url} (attempt {attempt}/{max_attempts}): {last_error}",
                    extra={"event": "fetch.retryable_error", "attempt": attempt, "url": url},
                )

        logger.error(
            f"Fetching {url} failed after {max_attempts} attempts: {last_error}",
            extra={"event": "fetch.failed", "attempts": max_attempts, "url": url},
        )
        raise last_error

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _wait_for_slot(self) -> None:
        if self.request_delay <= 0 or self._last_request_at is None:
            return
        elapsed = time.monotonic() - self._last_request_at
        if elapsed < self.request_delay:
            time.sleep(self.request_delay - elapsed)

    def _request(self, url: str) -> str:
        self._wait_for_slot()

        try:
            logger.debug(
                f"HTTP GET request to {url}",
                extra={"event": "fetch.request", "url": url, "timeout": self.timeout},
            )
            response = self._session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise FetchTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            raise FetchHTTPError(f"Request to {url} failed: {e}", status_code=0, url=url) from e
        finally:
            self._last_request_at = time.monotonic()

        if response.status_code >= 400:
            log_level = logging.WARNING if response.status_code >= 500 else logging.ERROR
            logger.log(
                log_level,
                f"HTTP {response.status_code} error from {url}",
                extra={"event": "fetch.http_error", "status_code": response.status_code, "url": url},
            )
            raise FetchHTTPError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
            )

        logger.debug(
            "HTTP request succeeded",
            extra={"event": "fetch.succeeded", "status_code": response.status_code, "url": url},
        )
        return response.text
