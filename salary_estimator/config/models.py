"""Configuration schema models using Pydantic."""

import math
import re
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator, model_validator

from salary_estimator.domain.locations import LOCATION_CITIES, default_location_codes

CANDIDATE_NAMES = ("decision_tree", "bagged_trees", "gradient_boosting")

DEFAULT_SEARCH_URL_TEMPLATE = (
    "https://www.glassdoor.com/Job/jobs.htm"
    "?sc.keyword={keyword}&locT=C&locId={location_code}&jobType=all&p={page}"
)
DEFAULT_LISTING_URL_PATTERN = r"https://www\.glassdoor\.com/job-listing/[^\s\"'<>]+"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class SearchConfig(BaseModel):
    """What to search for and where."""

    keyword: str = Field("data scientist", min_length=1, description="Search keyword")
    location_codes: List[str] = Field(
        default_factory=default_location_codes,
        min_length=1,
        description="Location codes to search, in scrape order",
    )
    search_url_template: str = Field(
        DEFAULT_SEARCH_URL_TEMPLATE,
        description="Search URL with {keyword}, {location_code} and {page} placeholders",
    )
    listing_url_pattern: str = Field(
        DEFAULT_LISTING_URL_PATTERN,
        description="Regular expression matching listing URLs in a results page body",
    )
    pages_per_location: int = Field(1, ge=1, le=30, description="Result pages per location")
    max_listings_per_location: int = Field(
        0, ge=0, description="Maximum listings scraped per location (0 = unlimited)"
    )

    @field_validator("keyword")
    @classmethod
    def strip_keyword(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("keyword cannot be empty or whitespace-only")
        return stripped

    @field_validator("location_codes", mode="before")
    @classmethod
    def validate_location_codes(cls, v: Any) -> Any:
        """Every code must resolve to a city in the location catalog.

        Unquoted YAML codes arrive as integers and are accepted as strings.
        """
        if not isinstance(v, list):
            return v
        codes = [str(code).strip() for code in v]
        unknown = [code for code in codes if code not in LOCATION_CITIES]
        if unknown:
            raise ValueError(f"Unknown location codes: {', '.join(unknown)}")
        return codes

    @field_validator("search_url_template")
    @classmethod
    def validate_template(cls, v: str) -> str:
        for placeholder in ("{keyword}", "{location_code}"):
            if placeholder not in v:
                raise ValueError(f"search_url_template must contain {placeholder}")
        return v

    @field_validator("listing_url_pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid listing_url_pattern: {e}") from e
        return v


class SelectorConfig(BaseModel):
    """XPath selectors into the listing page template.

    The header selectors are positional: when a company has no rating, every
    header field moves one slot to the left.
    """

    description: str = Field('//*[@id="JobDescriptionContainer"]')
    title: str = Field('//*[@id="JobView"]/div[1]/div[2]')
    rating: str = Field('//*[@id="JobView"]/div[1]/div[1]/*[1]')
    company_name: str = Field('//*[@id="JobView"]/div[1]/div[1]/*[2]')
    company_location: str = Field('//*[@id="JobView"]/div[1]/div[1]/*[3]')
    salary: str = Field('//*[@id="JobView"]/div[1]/div[3]/span[1]')

    @field_validator("*")
    @classmethod
    def non_empty(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("selector cannot be empty")
        return stripped


def _default_tuning_grids() -> Dict[str, Dict[str, List[Any]]]:
    return {
        "gradient_boosting": {
            "max_depth": [1, 5, 9],
            "n_estimators": [50 * i for i in range(1, 31)],
            "learning_rate": [0.1],
            "min_samples_leaf": [20],
        },
        "decision_tree": {
            "max_depth": [2, 4, 6, 8, None],
            "min_samples_leaf": [1, 5, 10, 20],
        },
        "bagged_trees": {
            "n_estimators": [10, 25, 50, 100],
            "max_samples": [0.5, 0.75, 1.0],
        },
    }


class ModelingConfig(BaseModel):
    """Evaluation protocol for model selection."""

    test_size: float = Field(0.1, gt=0.0, lt=0.5, description="Held-out test fraction")
    random_state: int = Field(123, ge=0, description="Seed for splits and estimators")
    cv_folds: int = Field(10, ge=2, le=20, description="Folds per cross-validation repeat")
    cv_repeats: int = Field(3, ge=1, le=10, description="Cross-validation repeats")
    stratify_bins: int = Field(5, ge=1, le=20, description="Target quantile bins for the split")
    n_jobs: int = Field(1, description="Parallel workers for CV and grid search (-1 = all cores)")
    min_labeled_rows: int = Field(20, ge=4, description="Minimum labeled rows needed to model")
    tuning_grids: Dict[str, Dict[str, List[Any]]] = Field(default_factory=_default_tuning_grids)

    @field_validator("n_jobs")
    @classmethod
    def validate_n_jobs(cls, v: int) -> int:
        if v == 0 or v < -1:
            raise ValueError("n_jobs must be a positive integer or -1")
        return v

    @field_validator("tuning_grids")
    @classmethod
    def validate_tuning_grids(cls, v: Dict[str, Dict[str, List[Any]]]) -> Dict[str, Dict[str, List[Any]]]:
        unknown = sorted(set(v) - set(CANDIDATE_NAMES))
        if unknown:
            raise ValueError(
                f"Unknown tuning grid candidates: {', '.join(unknown)}. "
                f"Expected one of: {', '.join(CANDIDATE_NAMES)}"
            )
        for name, grid in v.items():
            for param, values in grid.items():
                if not values:
                    raise ValueError(f"Tuning grid {name}.{param} cannot be empty")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(LogFormat.KEY_VALUE, description="Log output format (json or key-value)")

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """HTTP settings for the scraper."""

    http_request_timeout: int = Field(30, ge=5, le=300, description="Per-request timeout (seconds)")
    user_agent: str = Field(
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36",
        min_length=1,
        description="User-Agent header for HTTP requests",
    )
    request_delay_seconds: float = Field(1.0, ge=0.0, le=60.0, description="Pause between fetches")
    max_retries: int = Field(2, ge=0, le=10, description="Retries for transient fetch failures")
    retry_backoff_multiplier: float = Field(2.0, ge=1.0, le=5.0)
    retry_initial_delay: float = Field(1.0, ge=0.0, le=60.0)

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class OutputConfig(BaseModel):
    """Where run artifacts are written."""

    output_dir: str = Field("output", min_length=1, description="Directory for CSV and model artifacts")
    write_csv: bool = Field(True, description="Write dataset, report and prediction CSVs")
    save_model: bool = Field(True, description="Persist the refit model with joblib")


class AppConfig(BaseModel):
    """Root configuration object for the salary estimator."""

    search: SearchConfig = Field(default_factory=SearchConfig)
    selectors: SelectorConfig = Field(default_factory=SelectorConfig)
    modeling: ModelingConfig = Field(default_factory=ModelingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @model_validator(mode="after")
    def validate_split_against_folds(self):
        """The smallest labeled set must survive both the split and the CV folds."""
        rows = self.modeling.min_labeled_rows
        train_rows = rows - math.ceil(rows * self.modeling.test_size)
        if train_rows < self.modeling.cv_folds:
            raise ValueError(
                f"min_labeled_rows={rows} leaves {train_rows} training rows, "
                f"fewer than cv_folds={self.modeling.cv_folds}"
            )
        return self
