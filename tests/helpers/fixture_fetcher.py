"""Fixture-based fetcher for testing.

Serves canned HTML from a dict instead of making HTTP requests, and provides
builders for listing and search pages in the layout the default selectors
expect. Used for deterministic scraper and pipeline tests.
"""

from html import escape
from typing import Dict, Iterable, List, Optional

from salary_estimator.scraping.document import ListingDocument
from salary_estimator.scraping.exceptions import FetchHTTPError

LISTING_URL_PREFIX = "https://www.glassdoor.com/job-listing/"


def listing_url(slug: str) -> str:
    return f"{LISTING_URL_PREFIX}{slug}.htm"


def listing_page(
    title: Optional[str] = "Senior Data Scientist",
    description: Optional[str] = "We use Python and R for machine learning.",
    rating: Optional[str] = "4.1",
    company: Optional[str] = "Acme Analytics",
    location: Optional[str] = "San Francisco, CA",
    salary: Optional[str] = "$120,000 a year",
) -> str:
    """Build a listing page.

    Header slots are rendered positionally, so a None rating moves company
    and location one slot left, like the real page does.
    """
    header = "".join(
        f"<span>{escape(value)}</span>" for value in (rating, company, location) if value is not None
    )
    title_html = f"<div>{escape(title)}</div>" if title is not None else "<div></div>"
    salary_html = f"<div><span>{escape(salary)}</span></div>" if salary is not None else ""
    description_html = (
        f'<div id="JobDescriptionContainer"><p>{escape(description)}</p></div>'
        if description is not None
        else ""
    )
    return (
        "<html><body>"
        f'<div id="JobView"><div><div>{header}</div>{title_html}{salary_html}</div></div>'
        f"{description_html}"
        "</body></html>"
    )


def search_page(urls: Iterable[str]) -> str:
    links = "".join(f'<li><a href="{url}">Job</a></li>' for url in urls)
    return f"<html><body><ul>{links}</ul></body></html>"


class FixtureFetcher:
    """Fetcher that serves pages from a dict.

    Attributes:
        pages: URL -> HTML body
        failures: URL -> exception raised when that URL is fetched
        requested: Every URL fetched, in order
    """

    def __init__(
        self,
        pages: Optional[Dict[str, str]] = None,
        failures: Optional[Dict[str, Exception]] = None,
    ):
        self.pages = dict(pages or {})
        self.failures = dict(failures or {})
        self.requested: List[str] = []

    def fetch(self, url: str) -> ListingDocument:
        self.requested.append(url)
        if url in self.failures:
            raise self.failures[url]
        if url not in self.pages:
            raise FetchHTTPError("HTTP 404: Not Found", status_code=404, url=url)
        return ListingDocument.from_html(self.pages[url], url=url)

    def close(self) -> None:
        pass
