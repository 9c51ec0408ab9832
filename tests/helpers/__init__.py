"""Test helper utilities for salary estimator tests."""

from .fixture_fetcher import FixtureFetcher, listing_page, listing_url, search_page

__all__ = ["FixtureFetcher", "listing_page", "listing_url", "search_page"]
