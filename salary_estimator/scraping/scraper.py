"""Search-page crawling and per-listing extraction.

For every location code the scraper walks the configured number of search
result pages, discovers listing URLs in each page body and extracts one
RawListing per URL. Failures are contained: a broken listing becomes a
partial RawListing and a broken search page ends that location only.
"""

import re
import time
from dataclasses import dataclass, field
from itertools import chain
from typing import List, Optional, Protocol, Sequence, Tuple
from urllib.parse import quote_plus

from lxml import etree

from salary_estimator.config.models import SearchConfig
from salary_estimator.domain.models import RawListing
from salary_estimator.logging import get_logger
from salary_estimator.logging.context import log_context

from .document import ListingDocument
from .exceptions import ScrapeConfigurationError, ScrapeError
from .extractor import FieldExtractor

logger = get_logger(__name__, component="scraper")

# Characters the URL pattern can drag in from surrounding markup or JSON
URL_TRAILING_ARTIFACTS = "\"'\\,;)>"


class Fetcher(Protocol):
    def fetch(self, url: str) -> ListingDocument: ...


@dataclass
class LocationScrapeStats:
    """
    Statistics for one location code.

    Attributes:
        location_code: Location code searched
        pages_fetched: Search result pages fetched successfully
        urls_found: Listing URLs discovered across those pages
        listings_extracted: Listings extracted with at least one field
        failures: Listing fetch/extract failures (recorded as partial listings)
        aborted: Whether a search page failure ended this location early
        error_message: Error that aborted the location, if any
    """

    location_code: str
    pages_fetched: int = 0
    urls_found: int = 0
    listings_extracted: int = 0
    failures: int = 0
    aborted: bool = False
    error_message: Optional[str] = None


@dataclass
class ScrapeRunStats:
    """Per-location statistics for one scraper run."""

    locations: List[LocationScrapeStats] = field(default_factory=list)

    @property
    def total_urls(self) -> int:
        return sum(s.urls_found for s in self.locations)

    @property
    def total_failures(self) -> int:
        return sum(s.failures for s in self.locations)

    @property
    def aborted_locations(self) -> List[str]:
        return [s.location_code for s in self.locations if s.aborted]

    @property
    def had_errors(self) -> bool:
        return any(s.aborted or s.failures for s in self.locations)


def find_listing_urls(body: str, pattern: "re.Pattern[str]") -> List[str]:
    """Find listing URLs in a raw page body.

    Keeps discovery order and duplicates; trailing quote, bracket and
    punctuation artifacts are trimmed from each match.
    """
    urls = []
    for match in pattern.findall(body or ""):
        url = match.rstrip(URL_TRAILING_ARTIFACTS)
        if url:
            urls.append(url)
    return urls


class ListingScraper:
    """Crawl search pages for each location and extract every listing found."""

    def __init__(
        self,
        fetcher: Fetcher,
        extractor: Optional[FieldExtractor] = None,
        search_config: Optional[SearchConfig] = None,
    ) -> None:
        self.fetcher = fetcher
        self.extractor = extractor or FieldExtractor()
        self.config = search_config or SearchConfig()
        self._url_pattern = re.compile(self.config.listing_url_pattern)

        try:
            self.search_url(self.config.location_codes[0] if self.config.location_codes else "0", 1)
        except (KeyError, IndexError, ValueError) as e:
            raise ScrapeConfigurationError(
                f"Invalid search_url_template {self.config.search_url_template!r}: {e}"
            ) from e

    def search_url(self, location_code: str, page: int) -> str:
        return self.config.search_url_template.format(
            keyword=quote_plus(self.config.keyword),
            location_code=location_code,
            page=page,
        )

    def run(self, location_codes: Optional[Sequence[str]] = None) -> List[RawListing]:
        """Scrape every location and return the listings in location order."""
        listings, _ = self.run_with_stats(location_codes)
        return listings

    def run_with_stats(
        self, location_codes: Optional[Sequence[str]] = None
    ) -> Tuple[List[RawListing], ScrapeRunStats]:
        """Scrape every location, returning listings plus per-location stats.

        Args:
            location_codes: Codes to search; defaults to the configured codes

        Returns:
            (listings, stats). Listings are ordered by location, then by
            discovery order within each location. Duplicates are kept.
        """
        codes = list(location_codes) if location_codes is not None else list(self.config.location_codes)
        stats = ScrapeRunStats()
        started = time.monotonic()

        logger.info(
            f"Starting scrape of {len(codes)} locations",
            extra={"event": "scrape.run.started", "locations": len(codes), "keyword": self.config.keyword},
        )

        batches = []
        for code in codes:
            batch, location_stats = self.scrape_location(code)
            batches.append(batch)
            stats.locations.append(location_stats)

        listings: List[RawListing] = list(chain.from_iterable(batches))

        logger.info(
            f"Scrape finished with {len(listings)} listings",
            extra={
                "event": "scrape.run.completed",
                "listings": len(listings),
                "failures": stats.total_failures,
                "aborted_locations": stats.aborted_locations,
                "duration_seconds": round(time.monotonic() - started, 2),
            },
        )
        return listings, stats

    def scrape_location(self, location_code: str) -> Tuple[List[RawListing], LocationScrapeStats]:
        """Scrape all configured result pages for one location code."""
        stats = LocationScrapeStats(location_code=location_code)
        batch: List[RawListing] = []

        with log_context(location_code=location_code):
            logger.info(
                f"Scraping location {location_code}",
                extra={"event": "scrape.location.started"},
            )

            urls: List[str] = []
            for page in range(1, self.config.pages_per_location + 1):
                search_url = self.search_url(location_code, page)
                try:
                    document = self.fetcher.fetch(search_url)
                except ScrapeError as e:
                    stats.aborted = True
                    stats.error_message = str(e)
                    logger.error(
                        f"Search page {page} failed, skipping rest of location: {e}",
                        extra={"event": "scrape.location.aborted", "page": page, "url": search_url},
                    )
                    break

                stats.pages_fetched += 1
                page_urls = find_listing_urls(document.text, self._url_pattern)
                logger.debug(
                    f"Found {len(page_urls)} listing URLs on page {page}",
                    extra={"event": "scrape.page.parsed", "page": page, "urls": len(page_urls)},
                )
                urls.extend(page_urls)

            cap = self.config.max_listings_per_location
            if cap and len(urls) > cap:
                logger.warning(
                    "Truncating listings to max_listings_per_location",
                    extra={"event": "scrape.location.truncated", "total": len(urls), "max": cap},
                )
                urls = urls[:cap]
            stats.urls_found = len(urls)

            for url in urls:
                listing = self.scrape_listing(url, location_code)
                if listing.is_partial:
                    stats.failures += 1
                else:
                    stats.listings_extracted += 1
                batch.append(listing)

            logger.info(
                f"Location {location_code} produced {len(batch)} listings",
                extra={
                    "event": "scrape.location.completed",
                    "pages_fetched": stats.pages_fetched,
                    "listings": len(batch),
                    "failures": stats.failures,
                },
            )

        return batch, stats

    def scrape_listing(self, url: str, location_code: str) -> RawListing:
        """Fetch and extract one listing; failures yield a partial listing."""
        try:
            document = self.fetcher.fetch(url)
            return self.extractor.extract(document, url, location_code)
        except (ScrapeError, etree.LxmlError, ValueError) as e:
            logger.warning(
                f"Listing extraction failed, keeping partial record: {e}",
                extra={"event": "scrape.listing.failed", "url": url, "error_type": type(e).__name__},
            )
            return RawListing(url=url, location_code=location_code)
