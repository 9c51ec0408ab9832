"""Indicator catalog for free-text job descriptions and titles.

Text is upper-cased and every non-alphanumeric character is replaced by a
space before any test runs, so phrases match across punctuation. Word tests
look for the word padded by spaces, with the start and end of the text
counting as spaces.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

DESCRIPTION = "description"
TITLE = "title"
EITHER = "either"

_NON_ALPHANUMERIC = re.compile(r"[^A-Z0-9]")

Predicate = Callable[[str], bool]


def normalize_text(text: Optional[str]) -> str:
    """Upper-case text and replace every non-alphanumeric character with a space.

    Example:
        >>> normalize_text("Use R, Python & SQL.")
        'USE R  PYTHON   SQL '
    """
    if not text:
        return ""
    return _NON_ALPHANUMERIC.sub(" ", text.upper())


def contains(*needles: str) -> Predicate:
    """True when any needle occurs anywhere in the text."""
    return lambda text: any(needle in text for needle in needles)


def word(token: str) -> Predicate:
    """True when token appears as a whole word, bounded by spaces or the text edges."""
    padded = f" {token} "
    return lambda text: padded in f" {text} "


def any_of(*predicates: Predicate) -> Predicate:
    return lambda text: any(predicate(text) for predicate in predicates)


@dataclass(frozen=True)
class IndicatorRule:
    """One indicator: its column name, which text it reads and its test."""

    name: str
    source: str
    predicate: Predicate

    def applies(self, description: str, title: str) -> bool:
        if self.source == DESCRIPTION:
            return self.predicate(description)
        if self.source == TITLE:
            return self.predicate(title)
        return self.predicate(description) or self.predicate(title)


INDICATOR_RULES: Tuple[IndicatorRule, ...] = (
    # Degrees and fields of study
    IndicatorRule("MS", DESCRIPTION, any_of(contains("MASTERS"), word("MS"))),
    IndicatorRule("PHD", DESCRIPTION, contains("DOCTORATE", "PHD")),
    IndicatorRule("Statistics_Mathematics", DESCRIPTION, contains("STATISTICS", "MATHEMATICS")),
    IndicatorRule("ComputerScience", DESCRIPTION, any_of(contains("COMPUTER SCIENCE"), word("CS"))),
    # Tools
    IndicatorRule("Python", DESCRIPTION, contains("PYTHON")),
    IndicatorRule("R", DESCRIPTION, word("R")),
    IndicatorRule("Scala", DESCRIPTION, contains("SCALA")),
    IndicatorRule("SAS", DESCRIPTION, contains("SAS")),
    IndicatorRule("TensorFlow", DESCRIPTION, contains("TENSORFLOW")),
    IndicatorRule("Matlab", DESCRIPTION, contains("MATLAB")),
    # Methods
    IndicatorRule("MachineLearning", DESCRIPTION, contains("MACHINE LEARNING")),
    IndicatorRule("DeepLearning", DESCRIPTION, contains("DEEP LEARNING")),
    IndicatorRule("NeuralNetwork", DESCRIPTION, contains("NEURAL NETWORK")),
    IndicatorRule("StatisticalProgramming", DESCRIPTION, contains("STATISTICAL PROGRAMMING")),
    # Seniority and role
    IndicatorRule("EntryLevel", EITHER, contains("ENTRY LEVEL")),
    IndicatorRule("Sr_Title", TITLE, contains("SR", "SENIOR")),
    IndicatorRule("Jr_Title", TITLE, contains("JR", "JUNIOR")),
    IndicatorRule("Intern", TITLE, contains("INTERN")),
    IndicatorRule("Specialized_R_Python", TITLE, any_of(word("R"), contains("PYTHON"))),
    IndicatorRule("Consultant", TITLE, contains("CONSULTANT")),
    IndicatorRule("Lead", TITLE, contains("LEAD")),
    IndicatorRule("Analyst", TITLE, contains("ANALYST")),
    IndicatorRule("Scientist", TITLE, contains("SCIENTIST")),
)

INDICATOR_NAMES: Tuple[str, ...] = tuple(rule.name for rule in INDICATOR_RULES)

# Model inputs, in order
FEATURE_COLUMNS: Tuple[str, ...] = ("rating", "city") + INDICATOR_NAMES
TARGET_COLUMN = "target"
# Carried through for the prediction table only
ID_COLUMNS: Tuple[str, ...] = ("company_name", "title_text")
