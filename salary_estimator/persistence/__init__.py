"""Persistence layer for the published listing dataset (SQLAlchemy + SQLite).

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes
    - ListingRepository: store, replace and read normalized listings

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - DataIntegrityError: Constraint violations

Example usage:
    >>> from salary_estimator.persistence import init_database, get_session, ListingRepository
    >>> init_database("sqlite:///./data/salary_estimator.db")
    >>> with get_session() as session:
    ...     stored = ListingRepository(session).list_all()
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import DatabaseConnectionError, DataIntegrityError, PersistenceError
from .repositories import ListingRepository
from .schema import ListingModel

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories and models
    "ListingRepository",
    "ListingModel",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "DataIntegrityError",
]
