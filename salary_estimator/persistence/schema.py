"""Database schema definition and ORM models.

The listings table mirrors the published dataset: one column per
DATASET_COLUMNS entry plus a surrogate id and the scrape timestamp.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Float, Index, Integer, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from salary_estimator.domain.models import NormalizedListing
from salary_estimator.logging import get_logger
from salary_estimator.utils.timestamps import ensure_utc, utc_now

logger = get_logger(__name__, component="database")

Base = declarative_base()


class ListingModel(Base):
    """ORM model for the listings table."""

    __tablename__ = "listings"

    id = Column(Integer, primary_key=True, autoincrement=True)

    url = Column(Text, nullable=False)
    description_text = Column(Text, nullable=True)
    title_text = Column(Text, nullable=True)
    rating = Column(Float, nullable=False)
    company_name = Column(String(255), nullable=True)
    company_location = Column(String(255), nullable=True)
    salary_estimate = Column(Integer, nullable=True)
    location_code = Column(String(32), nullable=False)
    city = Column(String(128), nullable=False)

    # ISO 8601 UTC string
    scraped_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_listings_location_code", "location_code"),
        Index("idx_listings_city", "city"),
    )

    def to_domain(self) -> NormalizedListing:
        return NormalizedListing(
            url=self.url,
            description_text=self.description_text,
            title_text=self.title_text,
            rating=self.rating,
            company_name=self.company_name,
            company_location=self.company_location,
            salary_estimate=self.salary_estimate,
            location_code=self.location_code,
            city=self.city,
        )

    @classmethod
    def from_domain(
        cls, listing: NormalizedListing, scraped_at: Optional[datetime] = None
    ) -> "ListingModel":
        """Create ORM model from a normalized listing.

        Args:
            listing: Domain model instance
            scraped_at: When the listing was scraped (defaults to now, UTC)
        """
        return cls(**listing.to_row(), scraped_at=_format_datetime(scraped_at or utc_now()))


def _format_datetime(dt: datetime) -> str:
    """Format datetime as ISO 8601 UTC string with explicit Z suffix."""
    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def create_schema(engine: Engine) -> None:
    """Create all tables that don't exist yet."""
    Base.metadata.create_all(engine)
    logger.debug("Database schema ensured", extra={"event": "database.schema.created"})
