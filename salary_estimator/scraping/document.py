"""Parsed HTML document with positional XPath text lookups."""

from typing import Optional

from lxml import etree, html

from salary_estimator.logging import get_logger

logger = get_logger(__name__, component="scraper")


class ListingDocument:
    """An HTML page as fetched, plus an lxml tree for XPath lookups.

    Attributes:
        text: Raw response body (used for URL discovery on search pages)
        url: URL the document was fetched from, if known
    """

    def __init__(self, text: str, tree=None, url: Optional[str] = None) -> None:
        self.text = text or ""
        self.url = url
        self._tree = tree

    @classmethod
    def from_html(cls, text: Optional[str], url: Optional[str] = None) -> "ListingDocument":
        """Parse an HTML string.

        An empty or unparseable body yields a document whose lookups all
        return None.
        """
        tree = None
        if text and text.strip():
            try:
                tree = html.fromstring(text)
            except (etree.ParserError, ValueError) as e:
                logger.warning(
                    f"Failed to parse HTML document: {e}",
                    extra={"event": "scrape.document.unparseable", "url": url},
                )
        return cls(text or "", tree=tree, url=url)

    @property
    def is_empty(self) -> bool:
        return self._tree is None

    def find_text(self, xpath: str) -> Optional[str]:
        """Return the text of the first node matching xpath.

        String-valued expressions (e.g. ``string(//h1)``) return their string
        result. Returns None when nothing matches, the match has no text, or
        the expression is invalid.
        """
        if self._tree is None:
            return None

        try:
            result = self._tree.xpath(xpath)
        except etree.XPathError as e:
            logger.debug(
                f"XPath lookup failed: {e}",
                extra={"event": "scrape.document.xpath_error", "xpath": xpath, "url": self.url},
            )
            return None

        if isinstance(result, list):
            if not result:
                return None
            result = result[0]

        if isinstance(result, etree._Element):
            text = result.text_content() if hasattr(result, "text_content") else "".join(result.itertext())
        elif isinstance(result, (str, bytes)):
            text = result.decode() if isinstance(result, bytes) else str(result)
        elif isinstance(result, bool):
            return None
        else:
            text = str(result)

        return text if text else None
