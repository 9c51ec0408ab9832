"""Domain models for the salary estimator."""

from .locations import LOCATION_CITIES, default_location_codes
from .models import DATASET_COLUMNS, NormalizedListing, RawListing

__all__ = [
    "RawListing",
    "NormalizedListing",
    "DATASET_COLUMNS",
    "LOCATION_CITIES",
    "default_location_codes",
]
