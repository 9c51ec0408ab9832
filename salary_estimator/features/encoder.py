"""Feature encoding for normalized listings."""

from typing import Any, Dict, Iterable, Optional, Sequence

import pandas as pd

from salary_estimator.domain.models import NormalizedListing
from salary_estimator.logging import get_logger

from .rules import ID_COLUMNS, INDICATOR_RULES, TARGET_COLUMN, IndicatorRule, normalize_text

logger = get_logger(__name__, component="features")


class TextFeatureEncoder:
    """Encodes listings into fixed-width feature rows.

    Every row has rating, city, one 0/1 column per indicator rule (in rule
    order), the target (salary estimate or None) and the identification
    columns used by the prediction table. Missing text is treated as empty.
    """

    def __init__(self, rules: Sequence[IndicatorRule] = INDICATOR_RULES):
        self.rules = tuple(rules)
        self.feature_columns = ("rating", "city") + tuple(rule.name for rule in self.rules)

    def indicators(self, description_text: Optional[str], title_text: Optional[str]) -> Dict[str, int]:
        description = normalize_text(description_text)
        title = normalize_text(title_text)
        return {rule.name: int(rule.applies(description, title)) for rule in self.rules}

    def encode(self, listing: NormalizedListing) -> Dict[str, Any]:
        row: Dict[str, Any] = {"rating": listing.rating, "city": listing.city}
        row.update(self.indicators(listing.description_text, listing.title_text))
        row[TARGET_COLUMN] = listing.salary_estimate
        row["company_name"] = listing.company_name
        row["title_text"] = listing.title_text
        return row

    def encode_all(self, listings: Iterable[NormalizedListing]) -> pd.DataFrame:
        """Encode listings into a DataFrame.

        Returns:
            DataFrame with the feature columns, ``target`` (nullable Int64)
            and the identification columns, one row per listing in input order
        """
        columns = list(self.feature_columns) + [TARGET_COLUMN] + list(ID_COLUMNS)
        frame = pd.DataFrame([self.encode(listing) for listing in listings], columns=columns)
        frame["rating"] = frame["rating"].astype(float)
        frame[TARGET_COLUMN] = frame[TARGET_COLUMN].astype("Int64")
        for rule in self.rules:
            frame[rule.name] = frame[rule.name].astype(int)

        logger.info(
            f"Encoded {len(frame)} listings",
            extra={
                "event": "features.encoded",
                "rows": len(frame),
                "labeled": int(frame[TARGET_COLUMN].notna().sum()),
                "indicators": len(self.rules),
            },
        )
        return frame
