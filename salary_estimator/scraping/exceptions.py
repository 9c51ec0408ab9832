"""Custom exceptions for listing scraping."""


class ScrapeError(Exception):
    """Base exception for all scraping errors.

    Catching this exception will catch any fetch or extraction error that the
    scraper recovers from locally (partial listing, or skip to next location).
    """

    pass


class FetchHTTPError(ScrapeError):
    """HTTP request failed with 4xx or 5xx error, or the connection failed.

    A status_code of 0 means no response was received.
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        """Initialize HTTP error with status code and URL.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (e.g., 404, 503), 0 for connection errors
            url: URL that failed
        """
        super().__init__(message)
        self.status_code = status_code
        self.url = url

    @property
    def is_retryable(self) -> bool:
        return self.status_code == 0 or self.status_code >= 500 or self.status_code == 429


class FetchTimeoutError(ScrapeError):
    """HTTP request timed out."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class ScrapeConfigurationError(ScrapeError):
    """Invalid scraper configuration (bad template, bad URL pattern, bad timeout)."""

    pass
