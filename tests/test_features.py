"""Unit tests for the text feature encoder."""

import pytest

from salary_estimator.domain.models import NormalizedListing
from salary_estimator.features import (
    FEATURE_COLUMNS,
    INDICATOR_NAMES,
    INDICATOR_RULES,
    TextFeatureEncoder,
    normalize_text,
)


def make_listing(description="", title="Data Scientist", **overrides) -> NormalizedListing:
    data = {
        "url": "https://example.com/1",
        "description_text": description,
        "title_text": title,
        "rating": 4.0,
        "company_name": "Acme",
        "company_location": "Austin, TX",
        "salary_estimate": 100000,
        "location_code": "1139761",
        "city": "Austin",
    }
    data.update(overrides)
    return NormalizedListing(**data)


@pytest.fixture
def encoder():
    return TextFeatureEncoder()


def indicators(encoder, description="", title=""):
    return encoder.indicators(description, title)


class TestNormalizeText:
    def test_uppercases_and_replaces_punctuation(self):
        assert normalize_text("Use R, Python & SQL.") == "USE R  PYTHON   SQL "

    def test_none_is_empty(self):
        assert normalize_text(None) == ""


class TestIndicatorCatalog:
    """Tests for individual indicator rules."""

    def test_catalog_order_and_width(self):
        assert INDICATOR_NAMES[:6] == ("MS", "PHD", "Statistics_Mathematics", "ComputerScience", "Python", "R")
        assert INDICATOR_NAMES[-4:] == ("Consultant", "Lead", "Analyst", "Scientist")
        assert len(INDICATOR_RULES) == 23
        assert FEATURE_COLUMNS[:2] == ("rating", "city")

    def test_r_as_standalone_word(self, encoder):
        assert indicators(encoder, "You will use R to model data")["R"] == 1

    def test_r_at_end_of_text(self, encoder):
        assert indicators(encoder, "Experience with Python or R")["R"] == 1

    def test_r_after_punctuation(self, encoder):
        assert indicators(encoder, "Tools: SQL,R,Python")["R"] == 1

    def test_r_at_start_of_text(self, encoder):
        assert indicators(encoder, "R and SQL required")["R"] == 1
        assert indicators(encoder, "R")["R"] == 1

    def test_r_not_set_by_words_containing_r(self, encoder):
        assert indicators(encoder, "A rewarding career")["R"] == 0

    def test_python_substring(self, encoder):
        assert indicators(encoder, "Pythonic code")["Python"] == 1

    def test_ms_token_and_masters(self, encoder):
        assert indicators(encoder, "MS in statistics")["MS"] == 1
        assert indicators(encoder, "an MS in statistics")["MS"] == 1
        assert indicators(encoder, "a Masters degree")["MS"] == 1
        assert indicators(encoder, "degree: BS/MS")["MS"] == 1
        assert indicators(encoder, "Microsoft tools")["MS"] == 0

    def test_phd_and_doctorate(self, encoder):
        assert indicators(encoder, "PhD preferred")["PHD"] == 1
        assert indicators(encoder, "a doctorate")["PHD"] == 1

    def test_computer_science(self, encoder):
        assert indicators(encoder, "degree in computer science")["ComputerScience"] == 1
        assert indicators(encoder, "degree in CS or EE")["ComputerScience"] == 1
        assert indicators(encoder, "CSS and HTML")["ComputerScience"] == 0

    def test_phrases_match_across_punctuation(self, encoder):
        result = indicators(encoder, "machine-learning; deep learning and neural networks")
        assert result["MachineLearning"] == 1
        assert result["DeepLearning"] == 1
        assert result["NeuralNetwork"] == 1

    def test_entry_level_in_title_or_description(self, encoder):
        assert indicators(encoder, "", "Entry Level Analyst")["EntryLevel"] == 1
        assert indicators(encoder, "this is an entry-level role", "Analyst")["EntryLevel"] == 1
        assert indicators(encoder, "", "Analyst")["EntryLevel"] == 0

    def test_title_indicators(self, encoder):
        result = indicators(encoder, "", "Sr. Lead Data Scientist")
        assert result["Sr_Title"] == 1
        assert result["Lead"] == 1
        assert result["Scientist"] == 1
        assert result["Jr_Title"] == 0
        assert result["Analyst"] == 0

    def test_title_indicators_ignore_description(self, encoder):
        result = indicators(encoder, "Senior consultant intern analyst", "Data Scientist")
        assert result["Sr_Title"] == 0
        assert result["Consultant"] == 0
        assert result["Intern"] == 0
        assert result["Analyst"] == 0

    def test_specialized_title(self, encoder):
        assert indicators(encoder, "", "Data Scientist - R")["Specialized_R_Python"] == 1
        assert indicators(encoder, "", "Python Developer")["Specialized_R_Python"] == 1
        assert indicators(encoder, "", "Researcher")["Specialized_R_Python"] == 0
        assert indicators(encoder, "", "R Developer")["Specialized_R_Python"] == 1

    def test_missing_text_is_all_zero(self, encoder):
        assert set(encoder.indicators(None, None).values()) == {0}


class TestTextFeatureEncoder:
    """Tests for row and frame encoding."""

    def test_encode_row(self, encoder):
        row = encoder.encode(make_listing("Python and SQL", "Senior Data Scientist"))

        assert row["rating"] == 4.0
        assert row["city"] == "Austin"
        assert row["target"] == 100000
        assert row["Python"] == 1
        assert row["Sr_Title"] == 1
        assert row["company_name"] == "Acme"

    def test_encode_is_deterministic(self, encoder):
        listing = make_listing("Python, R and SAS", "Lead Analyst")
        assert encoder.encode(listing) == encoder.encode(listing)

    def test_encode_all_columns(self, encoder):
        frame = encoder.encode_all(
            [make_listing("Python"), make_listing("R", salary_estimate=None)]
        )

        assert list(frame.columns) == list(FEATURE_COLUMNS) + ["target", "company_name", "title_text"]
        assert frame["target"].isna().tolist() == [False, True]
        assert frame["Python"].tolist() == [1, 0]
        assert frame["R"].tolist() == [0, 1]

    def test_encode_all_empty(self, encoder):
        frame = encoder.encode_all([])
        assert len(frame) == 0
        assert "target" in frame.columns
