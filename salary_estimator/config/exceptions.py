"""Configuration errors."""

from typing import Iterable, List, Optional


class ConfigurationError(Exception):
    """Invalid or unreadable configuration.

    Attributes:
        message: One-line summary
        errors: Individual problems, one per invalid field
        suggestions: Hints printed after the errors
    """

    def __init__(
        self,
        message: str,
        errors: Optional[Iterable[str]] = None,
        suggestions: Optional[Iterable[str]] = None,
    ):
        self.message = message
        self.errors: List[str] = list(errors or ())
        self.suggestions: List[str] = list(suggestions or ())
        super().__init__(self.render())

    def render(self) -> str:
        """Summary, numbered errors and bulleted suggestions, one per line."""
        lines = [self.message]
        if self.errors:
            lines += ["", "Validation Errors:"]
            lines += [f"  {number}. {error}" for number, error in enumerate(self.errors, 1)]
        if self.suggestions:
            lines += ["", "Suggestions:"]
            lines += [f"  - {suggestion}" for suggestion in self.suggestions]
        return "\n".join(lines)
