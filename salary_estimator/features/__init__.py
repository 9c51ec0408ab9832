"""Text feature engineering: indicator catalog and listing encoder."""

from .encoder import TextFeatureEncoder
from .rules import (
    FEATURE_COLUMNS,
    ID_COLUMNS,
    INDICATOR_NAMES,
    INDICATOR_RULES,
    TARGET_COLUMN,
    IndicatorRule,
    normalize_text,
)

__all__ = [
    "TextFeatureEncoder",
    "IndicatorRule",
    "INDICATOR_RULES",
    "INDICATOR_NAMES",
    "FEATURE_COLUMNS",
    "TARGET_COLUMN",
    "ID_COLUMNS",
    "normalize_text",
]
