"""Unit tests for the normalization layer.

Tests:
- Header shift repair and its length threshold
- Rating parsing and the drop rule
- Salary parsing and hourly conversion
- Location join, batch statistics and idempotence
"""

from unittest.mock import patch

import pytest

from salary_estimator.domain.models import DATASET_COLUMNS, NormalizedListing, RawListing
from salary_estimator.normalization import (
    RATING_SHIFT_THRESHOLD,
    ListingNormalizer,
    annualize_hourly,
    parse_rating,
    parse_salary,
    repair_shifted_fields,
    to_dataset_frame,
)
from salary_estimator.normalization.salary import MAX_SALARY


def make_raw(**overrides) -> RawListing:
    data = {
        "url": "https://www.glassdoor.com/job-listing/a.htm",
        "location_code": "1147401",
        "description_text": "Python and SQL",
        "title_text": "Data Scientist",
        "rating_raw": "4.1",
        "name_raw": "Acme Analytics",
        "location_raw": "San Francisco, CA",
        "salary_raw": "$120,000 a year",
    }
    data.update(overrides)
    return RawListing(**data)


@pytest.fixture
def normalizer():
    return ListingNormalizer()


class TestRepairShiftedFields:
    """Tests for header slot repair."""

    def test_short_rating_is_not_shifted(self):
        header = repair_shifted_fields(make_raw())

        assert header.shifted is False
        assert header.rating_text == "4.1"
        assert header.company_name == "Acme Analytics"
        assert header.company_location == "San Francisco, CA"

    @pytest.mark.parametrize(
        "rating_raw",
        ["Acme Analytics", "Initech", "12345", "4.5 ★", "ABCDE"],
    )
    def test_any_rating_longer_than_threshold_is_shifted(self, rating_raw):
        raw = make_raw(rating_raw=rating_raw, name_raw="Austin, TX", location_raw=None)
        header = repair_shifted_fields(raw)

        assert len(rating_raw) > RATING_SHIFT_THRESHOLD
        assert header.shifted is True
        assert header.rating_text is None
        assert header.company_name == rating_raw
        assert header.company_location == "Austin, TX"

    def test_short_company_name_is_misread_as_rating(self):
        """Names of four characters or fewer stay in the rating slot."""
        header = repair_shifted_fields(make_raw(rating_raw="IBM", name_raw="Armonk, NY"))

        assert header.shifted is False
        assert header.rating_text == "IBM"

    def test_missing_rating_slot(self):
        header = repair_shifted_fields(make_raw(rating_raw=None))
        assert header.shifted is False
        assert header.rating_text is None


class TestParseRating:
    """Tests for rating parsing."""

    def test_parses_float(self):
        assert parse_rating("4.1") == 4.1

    def test_strips_leading_whitespace(self):
        assert parse_rating("  3.5") == 3.5

    @pytest.mark.parametrize("text", [None, "IBM", "", "n/a"])
    def test_unparseable_is_none(self, text):
        assert parse_rating(text) is None

    @pytest.mark.parametrize("text", ["0.5", "5.1", "nan", "inf"])
    def test_out_of_range_is_none(self, text):
        assert parse_rating(text) is None


class TestParseSalary:
    """Tests for salary parsing."""

    def test_hourly_rate_is_annualized(self):
        assert parse_salary("$45 per hour") == (94000, True)

    def test_annualize_rounds_to_thousand(self):
        assert annualize_hourly(45) == 94000
        assert annualize_hourly(50) == 104000

    def test_hourly_marker_is_case_insensitive(self):
        assert parse_salary("$45 Per HOUR") == (94000, True)

    def test_yearly_salary_bypasses_conversion(self):
        assert parse_salary("$70,000 a year") == (70000, False)

    def test_yearly_range_strips_to_digits(self):
        value, hourly = parse_salary("$70,000 - $90,000 a year")

        assert hourly is False
        assert value == 7000090000

    def test_plain_number(self):
        assert parse_salary("120000") == (120000, False)

    def test_value_beyond_int64_is_unparseable(self):
        assert parse_salary("$1,000,000,000 - $2,000,000,000 a year") == (None, False)
        assert parse_salary(str(MAX_SALARY)) == (MAX_SALARY, False)

    def test_annualized_value_beyond_int64_is_unparseable(self):
        assert parse_salary("$5,000,000,000,000,000 per hour") == (None, True)

    @pytest.mark.parametrize("raw", [None, "", "Not provided", "per year"])
    def test_unparseable_is_none(self, raw):
        value, _ = parse_salary(raw)
        assert value is None


class TestListingNormalizer:
    """Tests for ListingNormalizer."""

    def test_normalize_complete_listing(self, normalizer):
        [listing] = normalizer.normalize([make_raw()])

        assert listing == NormalizedListing(
            url="https://www.glassdoor.com/job-listing/a.htm",
            description_text="Python and SQL",
            title_text="Data Scientist",
            rating=4.1,
            company_name="Acme Analytics",
            company_location="San Francisco, CA",
            salary_estimate=120000,
            location_code="1147401",
            city="San Francisco",
        )

    def test_shifted_listing_is_dropped_for_missing_rating(self, normalizer):
        raw = make_raw(rating_raw="Acme Analytics", name_raw="San Francisco, CA", location_raw=None)

        listings, stats = normalizer.normalize_with_stats([raw])

        assert listings == []
        assert stats.shifted_repaired == 1
        assert stats.dropped_missing_rating == 1

    def test_unparseable_salary_keeps_record(self, normalizer):
        listings, stats = normalizer.normalize_with_stats([make_raw(salary_raw="Not listed")])

        assert len(listings) == 1
        assert listings[0].salary_estimate is None
        assert not listings[0].has_salary
        assert stats.salary_missing == 1

    def test_unknown_location_is_dropped(self, normalizer):
        listings, stats = normalizer.normalize_with_stats([make_raw(location_code="999")])

        assert listings == []
        assert stats.dropped_unknown_location == 1

    def test_custom_location_catalog(self):
        normalizer = ListingNormalizer(location_cities={"999": "Testville"})
        [listing] = normalizer.normalize([make_raw(location_code="999")])
        assert listing.city == "Testville"

    def test_stats_counts(self, normalizer):
        raws = [
            make_raw(),
            make_raw(salary_raw="$45 per hour"),
            make_raw(salary_raw=None),
            make_raw(rating_raw="Initech", name_raw="Austin, TX"),
            make_raw(location_code="0"),
        ]

        listings, stats = normalizer.normalize_with_stats(raws)

        assert len(listings) == 3
        assert stats.input == 5
        assert stats.output == 3
        assert stats.hourly_converted == 1
        assert stats.salary_missing == 1
        assert stats.shifted_repaired == 1
        assert stats.dropped_missing_rating == 1
        assert stats.dropped_unknown_location == 1
        assert stats.dropped == 2

    def test_preserves_input_order(self, normalizer):
        raws = [make_raw(url=f"https://example.com/{i}") for i in range(5)]
        assert [l.url for l in normalizer.normalize(raws)] == [r.url for r in raws]

    def test_unexpected_error_skips_record(self, normalizer):
        raws = [make_raw(url="https://example.com/1"), make_raw(url="https://example.com/2")]

        with patch(
            "salary_estimator.normalization.service.parse_salary",
            side_effect=[RuntimeError("boom"), (1000, False)],
        ):
            listings, stats = normalizer.normalize_with_stats(raws)

        assert [l.url for l in listings] == ["https://example.com/2"]
        assert stats.errors == 1

    def test_renormalize_is_noop(self, normalizer):
        raws = [
            make_raw(),
            make_raw(rating_raw="3.75", salary_raw="$45 per hour"),
            make_raw(rating_raw="5", salary_raw=None, name_raw=None, location_raw=None),
        ]
        first = normalizer.normalize(raws)

        assert normalizer.renormalize(first) == first


class TestDatasetFrame:
    """Tests for the published dataset table."""

    def test_oversized_salary_is_kept_without_estimate(self, normalizer):
        listings, stats = normalizer.normalize_with_stats(
            [make_raw(salary_raw="$1,000,000,000 - $2,000,000,000 a year")]
        )
        frame = to_dataset_frame(listings)

        assert stats.output == 1
        assert stats.salary_missing == 1
        assert listings[0].salary_estimate is None
        assert frame["salary_estimate"].isna().tolist() == [True]

    def test_columns_are_exact(self, normalizer):
        frame = to_dataset_frame(normalizer.normalize([make_raw(), make_raw(salary_raw=None)]))

        assert tuple(frame.columns) == DATASET_COLUMNS
        assert frame["salary_estimate"].tolist()[0] == 120000
        assert frame["salary_estimate"].isna().tolist() == [False, True]

    def test_empty_frame_has_columns(self):
        frame = to_dataset_frame([])

        assert tuple(frame.columns) == DATASET_COLUMNS
        assert len(frame) == 0
