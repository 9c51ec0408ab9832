"""Data models for the normalization layer."""

from dataclasses import asdict, dataclass


@dataclass
class NormalizationStats:
    """
    Counters for one normalization batch.

    Attributes:
        input: Raw listings received
        output: Normalized listings produced
        dropped_missing_rating: Dropped for an absent, unparseable or out-of-range rating
        dropped_unknown_location: Dropped because the location code is not in the catalog
        salary_missing: Kept listings without a usable salary (the prediction set)
        hourly_converted: Salaries converted from an hourly rate
        shifted_repaired: Listings whose header slots were shifted and repaired
        errors: Listings skipped because of an unexpected error
    """

    input: int = 0
    output: int = 0
    dropped_missing_rating: int = 0
    dropped_unknown_location: int = 0
    salary_missing: int = 0
    hourly_converted: int = 0
    shifted_repaired: int = 0
    errors: int = 0

    @property
    def dropped(self) -> int:
        return self.dropped_missing_rating + self.dropped_unknown_location + self.errors

    def to_dict(self) -> dict:
        return asdict(self)
