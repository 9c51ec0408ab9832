"""Listing scraping: HTTP fetching, XPath field extraction and search crawling."""

from .document import ListingDocument
from .exceptions import FetchHTTPError, FetchTimeoutError, ScrapeConfigurationError, ScrapeError
from .extractor import FieldExtractor
from .fetcher import HttpFetcher
from .scraper import ListingScraper, LocationScrapeStats, ScrapeRunStats, find_listing_urls

__all__ = [
    "ListingDocument",
    "FieldExtractor",
    "HttpFetcher",
    "ListingScraper",
    "LocationScrapeStats",
    "ScrapeRunStats",
    "find_listing_urls",
    "ScrapeError",
    "FetchHTTPError",
    "FetchTimeoutError",
    "ScrapeConfigurationError",
]
