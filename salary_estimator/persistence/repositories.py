"""Data access layer for the listing store.

Repositories encapsulate database operations and return domain models rather
than ORM models.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from salary_estimator.domain.models import NormalizedListing
from salary_estimator.logging import get_logger
from salary_estimator.utils.timestamps import utc_now

from .exceptions import DataIntegrityError, PersistenceError
from .schema import ListingModel

logger = get_logger(__name__, component="database")


class ListingRepository:
    """Repository for the published listing dataset."""

    def __init__(self, session: Session):
        self.session = session

    def add_all(
        self, listings: Iterable[NormalizedListing], scraped_at: Optional[datetime] = None
    ) -> int:
        """Append listings, keeping their order.

        Args:
            listings: Normalized listings to store
            scraped_at: Timestamp recorded on every row (defaults to now)

        Returns:
            Number of rows added

        Raises:
            DataIntegrityError: If a row violates a table constraint
            PersistenceError: If any other database error occurs
        """
        timestamp = scraped_at or utc_now()
        try:
            models = [ListingModel.from_domain(listing, scraped_at=timestamp) for listing in listings]
            self.session.add_all(models)
            self.session.flush()
            logger.debug(
                f"Stored {len(models)} listings",
                extra={"event": "database.listings.added", "count": len(models)},
            )
            return len(models)

        except IntegrityError as e:
            logger.error(f"Integrity error storing listings: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to store listings: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error storing listings: {e}", exc_info=True)
            raise PersistenceError(f"Failed to store listings: {e}") from e

    def replace_all(
        self, listings: Iterable[NormalizedListing], scraped_at: Optional[datetime] = None
    ) -> int:
        """Replace the stored dataset with listings in one transaction.

        Returns:
            Number of rows now stored
        """
        try:
            deleted = self.session.execute(delete(ListingModel)).rowcount
            logger.debug(
                f"Cleared {deleted} stored listings",
                extra={"event": "database.listings.cleared", "count": deleted},
            )
        except SQLAlchemyError as e:
            logger.error(f"Error clearing listings: {e}", exc_info=True)
            raise PersistenceError(f"Failed to clear listings: {e}") from e

        return self.add_all(listings, scraped_at=scraped_at)

    def list_all(self) -> List[NormalizedListing]:
        """All stored listings in insertion order."""
        try:
            stmt = select(ListingModel).order_by(ListingModel.id)
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            logger.error(f"Error listing stored listings: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list listings: {e}") from e

    def count(self) -> int:
        try:
            return self.session.execute(select(func.count()).select_from(ListingModel)).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting listings: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count listings: {e}") from e
