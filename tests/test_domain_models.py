"""Unit tests for domain models and the location catalog."""

import pytest
from pydantic import ValidationError

from salary_estimator.domain import (
    DATASET_COLUMNS,
    LOCATION_CITIES,
    NormalizedListing,
    RawListing,
    default_location_codes,
)


class TestRawListing:
    def test_required_fields_are_stripped(self):
        raw = RawListing(url="  https://example.com/1 ", location_code=" 1147401 ")

        assert raw.url == "https://example.com/1"
        assert raw.location_code == "1147401"

    def test_blank_url_rejected(self):
        with pytest.raises(ValidationError):
            RawListing(url="   ", location_code="1147401")

    def test_blank_slots_become_none(self):
        raw = RawListing(url="https://example.com/1", location_code="1147401", rating_raw="  ", salary_raw="")

        assert raw.rating_raw is None
        assert raw.salary_raw is None

    def test_leading_whitespace_in_rating_is_kept(self):
        raw = RawListing(url="https://example.com/1", location_code="1147401", rating_raw=" 4.1")
        assert raw.rating_raw == " 4.1"

    def test_is_partial(self):
        assert RawListing(url="https://example.com/1", location_code="1147401").is_partial
        assert not RawListing(url="https://example.com/1", location_code="1147401", title_text="x").is_partial

    def test_frozen(self):
        raw = RawListing(url="https://example.com/1", location_code="1147401")
        with pytest.raises(ValidationError):
            raw.title_text = "changed"


class TestNormalizedListing:
    def make(self, **overrides):
        data = {
            "url": "https://example.com/1",
            "rating": 4.0,
            "location_code": "1147401",
            "city": "San Francisco",
        }
        data.update(overrides)
        return NormalizedListing(**data)

    @pytest.mark.parametrize("rating", [0.9, 5.1])
    def test_rating_range_enforced(self, rating):
        with pytest.raises(ValidationError):
            self.make(rating=rating)

    def test_has_salary(self):
        assert self.make(salary_estimate=100000).has_salary
        assert not self.make().has_salary

    def test_to_row_column_order(self):
        assert tuple(self.make().to_row()) == DATASET_COLUMNS


class TestLocationCatalog:
    def test_default_codes_follow_catalog_order(self):
        codes = default_location_codes()

        assert codes == list(LOCATION_CITIES)
        assert codes[0] == "1132348"
        assert LOCATION_CITIES["1147401"] == "San Francisco"

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            LOCATION_CITIES["1"] = "Nowhere"

    def test_cities_are_unique(self):
        assert len(set(LOCATION_CITIES.values())) == len(LOCATION_CITIES)
