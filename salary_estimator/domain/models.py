"""Core domain models for scraped and normalized job listings.

- RawListing: fields as extracted from a listing page, before any repair
- NormalizedListing: repaired, parsed and city-joined record (the published dataset row)
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Column order of the published dataset. Downstream consumers rely on it.
DATASET_COLUMNS = (
    "url",
    "description_text",
    "title_text",
    "rating",
    "company_name",
    "company_location",
    "salary_estimate",
    "location_code",
    "city",
)


class RawListing(BaseModel):
    """Raw listing data from the field extractor before normalization.

    When a company has no rating, the page shifts its header fields: the
    rating slot holds the company name, the name slot holds the location and
    the location slot is empty. RawListing records the slots as found; the
    normalization layer repairs the shift.
    """

    url: str = Field(..., description="Listing page URL")
    location_code: str = Field(..., description="Location code of the search that found it")
    description_text: Optional[str] = Field(None, description="Full description text")
    title_text: Optional[str] = Field(None, description="Job title")
    rating_raw: Optional[str] = Field(None, description="Text of the rating slot")
    name_raw: Optional[str] = Field(None, description="Text of the company name slot")
    location_raw: Optional[str] = Field(None, description="Text of the company location slot")
    salary_raw: Optional[str] = Field(None, description="Text of the salary estimate slot")

    @field_validator("url", "location_code")
    @classmethod
    def strip_required(cls, v: str) -> str:
        """Strip whitespace from required fields."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator(
        "description_text", "title_text", "rating_raw", "name_raw", "location_raw", "salary_raw"
    )
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank slots as absent. Leading whitespace is kept for the rating heuristic."""
        if v is None or not v.strip():
            return None
        return v

    @property
    def is_partial(self) -> bool:
        """True when nothing beyond url and location_code was extracted."""
        return all(
            value is None
            for value in (
                self.description_text,
                self.title_text,
                self.rating_raw,
                self.name_raw,
                self.location_raw,
                self.salary_raw,
            )
        )

    model_config = {"frozen": True, "json_schema_extra": {"example": {
        "url": "https://www.glassdoor.com/job-listing/data-scientist-acme-JV_IC1147401_KO0,14_KE15,19.htm?jl=1008",
        "location_code": "1147401",
        "description_text": "We use Python and R to build machine learning models...",
        "title_text": "Senior Data Scientist",
        "rating_raw": "4.1",
        "name_raw": "Acme Analytics",
        "location_raw": "San Francisco, CA",
        "salary_raw": "$120,000 a year",
    }}}


class NormalizedListing(BaseModel):
    """Listing with repaired fields, parsed rating/salary and resolved city.

    A record without a parseable rating never becomes a NormalizedListing.
    salary_estimate is None when the source gave no usable estimate; those
    records form the prediction set.
    """

    url: str = Field(..., description="Listing page URL")
    description_text: Optional[str] = Field(None, description="Full description text")
    title_text: Optional[str] = Field(None, description="Job title")
    rating: float = Field(..., ge=1.0, le=5.0, description="Company rating")
    company_name: Optional[str] = Field(None, description="Company name")
    company_location: Optional[str] = Field(None, description="Company location")
    salary_estimate: Optional[int] = Field(None, description="Annual salary estimate in dollars")
    location_code: str = Field(..., description="Location code of the originating search")
    city: str = Field(..., description="City resolved from location_code")

    @property
    def has_salary(self) -> bool:
        return self.salary_estimate is not None

    def to_row(self) -> dict:
        """Dataset row with exactly DATASET_COLUMNS, in order."""
        data = self.model_dump()
        return {column: data[column] for column in DATASET_COLUMNS}

    model_config = {"frozen": True}
