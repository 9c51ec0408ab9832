"""Normalization layer: raw listings to the published listing dataset.

This module provides:
- ListingNormalizer: header repair, rating/salary parsing and city join
- NormalizationStats: per-batch counters
- parse_salary / parse_rating / repair_shifted_fields: the individual steps
- to_dataset_frame: the published dataset as a DataFrame
"""

from .models import NormalizationStats
from .salary import annualize_hourly, parse_salary
from .service import (
    RATING_SHIFT_THRESHOLD,
    HeaderFields,
    ListingNormalizer,
    parse_rating,
    repair_shifted_fields,
    to_dataset_frame,
    to_raw_listing,
)

__all__ = [
    "ListingNormalizer",
    "NormalizationStats",
    "HeaderFields",
    "RATING_SHIFT_THRESHOLD",
    "repair_shifted_fields",
    "parse_rating",
    "parse_salary",
    "annualize_hourly",
    "to_dataset_frame",
    "to_raw_listing",
]
