"""Field extraction from listing pages via fixed XPath selectors."""

from typing import Optional

from salary_estimator.config.models import SelectorConfig
from salary_estimator.domain.models import RawListing
from salary_estimator.logging import get_logger

from .document import ListingDocument

logger = get_logger(__name__, component="extractor")

# RawListing field -> SelectorConfig attribute
FIELD_SELECTORS = (
    ("description_text", "description"),
    ("title_text", "title"),
    ("rating_raw", "rating"),
    ("name_raw", "company_name"),
    ("location_raw", "company_location"),
    ("salary_raw", "salary"),
)


def collapse_whitespace(text: Optional[str]) -> Optional[str]:
    """Collapse runs of whitespace to single spaces; blank text becomes None."""
    if text is None:
        return None
    collapsed = " ".join(text.split())
    return collapsed or None


class FieldExtractor:
    """Turn one listing document into a RawListing.

    Each field is looked up independently by its selector. A lookup that
    finds nothing (or fails) leaves that field as None and extraction carries
    on with the rest. The header slots are recorded positionally; when the
    company has no rating the slots shift and the normalizer repairs them.
    """

    def __init__(self, selectors: Optional[SelectorConfig] = None) -> None:
        self.selectors = selectors or SelectorConfig()

    def extract(self, document: ListingDocument, url: str, location_code: str) -> RawListing:
        """Extract all fields from document.

        Args:
            document: Parsed listing page
            url: URL the page was fetched from
            location_code: Location code of the search that discovered the URL

        Returns:
            RawListing with None for every field that could not be found
        """
        values = {}
        for field_name, selector_name in FIELD_SELECTORS:
            xpath = getattr(self.selectors, selector_name)
            try:
                values[field_name] = collapse_whitespace(document.find_text(xpath))
            except Exception as e:
                logger.warning(
                    f"Lookup for {field_name} failed: {e}",
                    extra={"event": "extract.field.failed", "field": field_name, "url": url},
                )
                values[field_name] = None

        missing = [name for name, _ in FIELD_SELECTORS if values[name] is None]
        if missing:
            logger.debug(
                "Listing extracted with missing fields",
                extra={"event": "extract.fields.missing", "url": url, "missing": missing},
            )

        return RawListing(url=url, location_code=location_code, **values)
