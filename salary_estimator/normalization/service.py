"""Listing normalization: header repair, rating and salary parsing, city join.

Each RawListing goes through four explicit steps:
1. repair_shifted_fields: realign the rating/name/location header slots
2. parse_rating: drop the listing if no usable rating remains
3. parse_salary: annual dollars, converting hourly rates; missing is kept
4. location join: resolve the search location code to its city
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from salary_estimator.domain.locations import LOCATION_CITIES
from salary_estimator.domain.models import DATASET_COLUMNS, NormalizedListing, RawListing
from salary_estimator.logging import get_logger

from .models import NormalizationStats
from .salary import parse_salary

logger = get_logger(__name__, component="normalization")

# A rating slot longer than this holds a company name, not a rating.
RATING_SHIFT_THRESHOLD = 4

MIN_RATING = 1.0
MAX_RATING = 5.0


@dataclass(frozen=True)
class HeaderFields:
    """Header slots after shift repair."""

    rating_text: Optional[str]
    company_name: Optional[str]
    company_location: Optional[str]
    shifted: bool


def repair_shifted_fields(raw: RawListing) -> HeaderFields:
    """Realign header slots when the rating is missing.

    Without a rating the page moves the company name into the rating slot
    and the location into the name slot. Any rating text longer than
    RATING_SHIFT_THRESHOLD characters is taken as such a shift, including
    short or oddly formatted names that a stricter test would catch.
    """
    if raw.rating_raw is not None and len(raw.rating_raw) > RATING_SHIFT_THRESHOLD:
        return HeaderFields(
            rating_text=None,
            company_name=raw.rating_raw,
            company_location=raw.name_raw,
            shifted=True,
        )
    return HeaderFields(
        rating_text=raw.rating_raw,
        company_name=raw.name_raw,
        company_location=raw.location_raw,
        shifted=False,
    )


def parse_rating(text: Optional[str]) -> Optional[float]:
    """Parse a rating, returning None when absent, unparseable or outside [1, 5]."""
    if text is None:
        return None
    try:
        value = float(text.lstrip())
    except ValueError:
        return None
    if not math.isfinite(value) or not MIN_RATING <= value <= MAX_RATING:
        return None
    return value


class ListingNormalizer:
    """Normalizes RawListings into NormalizedListings.

    Never raises for a single bad record: unexpected errors are logged and
    the record is skipped.
    """

    def __init__(
        self,
        location_cities: Optional[Mapping[str, str]] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.location_cities = location_cities if location_cities is not None else LOCATION_CITIES
        self.logger = logger_instance or logger

    def normalize(self, listings: Iterable[RawListing]) -> List[NormalizedListing]:
        normalized, _ = self.normalize_with_stats(listings)
        return normalized

    def normalize_with_stats(
        self, listings: Iterable[RawListing]
    ) -> Tuple[List[NormalizedListing], NormalizationStats]:
        """Normalize a batch and count what happened to each record.

        Args:
            listings: Raw listings in scrape order

        Returns:
            (normalized listings in input order, NormalizationStats)
        """
        stats = NormalizationStats()
        normalized: List[NormalizedListing] = []

        for raw in listings:
            stats.input += 1
            try:
                listing = self.normalize_one(raw, stats)
            except Exception as e:
                stats.errors += 1
                self.logger.error(
                    f"Error normalizing listing {getattr(raw, 'url', None)}: {e}",
                    exc_info=True,
                    extra={"event": "normalization.listing.error"},
                )
                continue
            if listing is not None:
                normalized.append(listing)

        stats.output = len(normalized)
        self.logger.info(
            f"Normalized {stats.output} of {stats.input} listings",
            extra={"event": "normalization.batch.completed", **stats.to_dict()},
        )
        return normalized, stats

    def normalize_one(
        self, raw: RawListing, stats: Optional[NormalizationStats] = None
    ) -> Optional[NormalizedListing]:
        """Normalize one listing, or return None when it must be dropped."""
        stats = stats if stats is not None else NormalizationStats()

        header = repair_shifted_fields(raw)
        if header.shifted:
            stats.shifted_repaired += 1

        rating = parse_rating(header.rating_text)
        if rating is None:
            stats.dropped_missing_rating += 1
            self._log_drop(raw, "missing_rating", rating_text=header.rating_text)
            return None

        salary, hourly = parse_salary(raw.salary_raw)
        if hourly and salary is not None:
            stats.hourly_converted += 1
        if salary is None:
            stats.salary_missing += 1

        city = self.location_cities.get(raw.location_code)
        if city is None:
            stats.dropped_unknown_location += 1
            self.logger.warning(
                f"Location code {raw.location_code} is not in the catalog",
                extra={
                    "event": "normalization.listing.dropped",
                    "reason": "unknown_location",
                    "url": raw.url,
                    "location_code": raw.location_code,
                },
            )
            return None

        return NormalizedListing(
            url=raw.url,
            description_text=raw.description_text,
            title_text=raw.title_text,
            rating=rating,
            company_name=header.company_name,
            company_location=header.company_location,
            salary_estimate=salary,
            location_code=raw.location_code,
            city=city,
        )

    def renormalize(self, listings: Iterable[NormalizedListing]) -> List[NormalizedListing]:
        """Run already-normalized listings through normalization again.

        Clean records (short numeric rating, whole-dollar salary) come back
        unchanged.
        """
        return self.normalize(to_raw_listing(listing) for listing in listings)

    def _log_drop(self, raw: RawListing, reason: str, **fields) -> None:
        self.logger.debug(
            f"Dropping listing {raw.url}: {reason}",
            extra={"event": "normalization.listing.dropped", "reason": reason, "url": raw.url, **fields},
        )


def to_raw_listing(listing: NormalizedListing) -> RawListing:
    """Express a normalized listing in raw form."""
    return RawListing(
        url=listing.url,
        location_code=listing.location_code,
        description_text=listing.description_text,
        title_text=listing.title_text,
        rating_raw=repr(listing.rating),
        name_raw=listing.company_name,
        location_raw=listing.company_location,
        salary_raw=str(listing.salary_estimate) if listing.salary_estimate is not None else None,
    )


def to_dataset_frame(listings: Iterable[NormalizedListing]) -> pd.DataFrame:
    """Build the published dataset table with exactly DATASET_COLUMNS."""
    frame = pd.DataFrame([listing.to_row() for listing in listings], columns=list(DATASET_COLUMNS))
    frame["rating"] = frame["rating"].astype(float)
    frame["salary_estimate"] = frame["salary_estimate"].astype("Int64")
    return frame
