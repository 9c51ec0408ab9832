"""Custom exceptions for model selection."""


class ModelingError(Exception):
    """Base exception for model fitting and selection errors."""

    pass


class InsufficientDataError(ModelingError):
    """Too few labeled rows to split, cross-validate and compare models."""

    def __init__(self, message: str, labeled_rows: int, required_rows: int) -> None:
        super().__init__(message)
        self.labeled_rows = labeled_rows
        self.required_rows = required_rows
