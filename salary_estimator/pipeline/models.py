"""Data models for pipeline execution tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from salary_estimator.modeling.models import SelectionResult
from salary_estimator.normalization.models import NormalizationStats
from salary_estimator.scraping.scraper import ScrapeRunStats


@dataclass
class StageStats:
    """
    Statistics for one pipeline stage.

    Attributes:
        name: Stage name (scrape, normalize, persist, export, encode, select)
        input_count: Records entering the stage
        output_count: Records leaving the stage
        duration_seconds: Wall time spent in the stage
        had_errors: Whether the stage degraded or failed
        error_message: Error that failed the stage, if any
    """

    name: str
    input_count: int = 0
    output_count: int = 0
    duration_seconds: float = 0.0
    had_errors: bool = False
    error_message: Optional[str] = None


@dataclass
class PipelineRunResult:
    """
    Aggregate results from one pipeline run.

    Attributes:
        run_id: Identifier attached to every log record of the run
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        total_duration_seconds: Total time for the entire run
        scraped_count: Raw listings produced by the scraper
        normalized_count: Listings that survived normalization
        persisted_count: Listings stored in the database
        labeled_count: Listings with a salary estimate
        predicted_count: Listings that received a predicted salary
        best_model: Name of the selected model, if modeling ran
        stages: Per-stage statistics in execution order
        scrape_stats: Per-location scraper statistics (None when reading a dataset)
        normalization_stats: Normalization counters (None when reading a dataset)
        selection: Full model selection result, if modeling succeeded
        artifacts: Written files keyed by kind (dataset, report, predictions, model)
        modeling_error: Why modeling did not produce a result, if it failed
        had_errors: Whether any stage degraded or failed
    """

    run_id: str
    run_started_at: datetime
    run_finished_at: Optional[datetime] = None
    total_duration_seconds: float = 0.0
    scraped_count: int = 0
    normalized_count: int = 0
    persisted_count: int = 0
    labeled_count: int = 0
    predicted_count: int = 0
    best_model: Optional[str] = None
    stages: List[StageStats] = field(default_factory=list)
    scrape_stats: Optional[ScrapeRunStats] = None
    normalization_stats: Optional[NormalizationStats] = None
    selection: Optional[SelectionResult] = None
    artifacts: Dict[str, Path] = field(default_factory=dict)
    modeling_error: Optional[str] = None
    had_errors: bool = False

    def finish(self, finished_at: datetime) -> None:
        """Stamp the end time and fold stage errors into had_errors."""
        self.run_finished_at = finished_at
        self.total_duration_seconds = (finished_at - self.run_started_at).total_seconds()
        self.had_errors = self.had_errors or any(stage.had_errors for stage in self.stages)

    def stage(self, name: str) -> Optional[StageStats]:
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None
