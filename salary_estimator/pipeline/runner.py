"""Pipeline orchestration: scrape, normalize, persist, encode, select, export."""

import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional
from uuid import uuid4

from salary_estimator.config.environment import EnvironmentConfig
from salary_estimator.config.models import AppConfig
from salary_estimator.domain.models import NormalizedListing
from salary_estimator.export import (
    read_dataset,
    save_model,
    write_dataset,
    write_model_report,
    write_predictions,
)
from salary_estimator.features import TextFeatureEncoder
from salary_estimator.logging import get_logger
from salary_estimator.logging.context import log_context
from salary_estimator.modeling import ModelSelector, ModelingError
from salary_estimator.normalization import ListingNormalizer
from salary_estimator.persistence import ListingRepository, PersistenceError, get_session
from salary_estimator.scraping import FieldExtractor, HttpFetcher, ListingScraper
from salary_estimator.scraping.scraper import Fetcher
from salary_estimator.utils.timestamps import utc_now

from .models import PipelineRunResult, StageStats

logger = get_logger(__name__, component="pipeline")


class SalaryPipeline:
    """
    Runs the salary estimation pipeline once, end to end.

    Stages run in a fixed order. Scrape and normalize failures are contained
    per record or per location. Persistence, export and modeling failures are
    recorded on their stage and the run still writes whatever it can.
    """

    def __init__(
        self,
        app_config: AppConfig,
        env_config: EnvironmentConfig,
        fetcher: Optional[Fetcher] = None,
        persist: bool = True,
        skip_modeling: bool = False,
    ):
        """
        Initialize the pipeline.

        Args:
            app_config: Application configuration
            env_config: Environment configuration
            fetcher: Page fetcher; defaults to an HttpFetcher built from app_config.advanced
            persist: Store the normalized dataset in the database (requires init_database())
            skip_modeling: Stop after the dataset is published
        """
        self.app_config = app_config
        self.env_config = env_config
        self.fetcher = fetcher
        self.persist = persist
        self.skip_modeling = skip_modeling

    @property
    def output_dir(self) -> Path:
        return Path(self.env_config.output_dir or self.app_config.output.output_dir)

    def run_once(self) -> PipelineRunResult:
        """
        Scrape every configured location and model the resulting dataset.

        Returns:
            PipelineRunResult with per-stage statistics and artifacts

        Raises:
            No exceptions are raised for stage failures; they are captured
            in the result.
        """
        result = PipelineRunResult(run_id=uuid4().hex, run_started_at=utc_now())

        with log_context(run_id=result.run_id):
            logger.info(
                "Pipeline run started",
                extra={
                    "event": "pipeline.run.started",
                    "mode": "scrape",
                    "locations": len(self.app_config.search.location_codes),
                },
            )

            owns_fetcher = self.fetcher is None
            fetcher = self.fetcher or HttpFetcher.from_config(self.app_config.advanced)
            try:
                with self._stage(result, "scrape") as stage:
                    scraper = ListingScraper(
                        fetcher,
                        FieldExtractor(self.app_config.selectors),
                        self.app_config.search,
                    )
                    raw_listings, scrape_stats = scraper.run_with_stats()
                    result.scrape_stats = scrape_stats
                    result.scraped_count = len(raw_listings)
                    stage.input_count = scrape_stats.total_urls
                    stage.output_count = len(raw_listings)
                    stage.had_errors = scrape_stats.had_errors
            finally:
                if owns_fetcher:
                    fetcher.close()

            with self._stage(result, "normalize") as stage:
                listings, norm_stats = ListingNormalizer().normalize_with_stats(raw_listings)
                result.normalization_stats = norm_stats
                result.normalized_count = len(listings)
                stage.input_count = norm_stats.input
                stage.output_count = norm_stats.output
                stage.had_errors = norm_stats.errors > 0

            if self.persist:
                self._persist(result, listings)

            if self.app_config.output.write_csv:
                with self._stage(result, "export_dataset") as stage:
                    stage.input_count = len(listings)
                    try:
                        result.artifacts["dataset"] = write_dataset(listings, self.output_dir)
                    except Exception as e:
                        self._record_failure(stage, e, "Failed to write dataset")
                    else:
                        stage.output_count = len(listings)

            self._model(result, listings)
            return self._finish(result)

    def run_from_dataset(self, path: Path) -> PipelineRunResult:
        """Model a previously published dataset CSV instead of scraping."""
        result = PipelineRunResult(run_id=uuid4().hex, run_started_at=utc_now())

        with log_context(run_id=result.run_id):
            logger.info(
                "Pipeline run started",
                extra={"event": "pipeline.run.started", "mode": "dataset", "path": str(path)},
            )

            with self._stage(result, "load_dataset") as stage:
                listings = read_dataset(path)
                result.normalized_count = len(listings)
                stage.output_count = len(listings)

            self._model(result, listings)
            return self._finish(result)

    def _persist(self, result: PipelineRunResult, listings: List[NormalizedListing]) -> None:
        stage = StageStats(name="persist", input_count=len(listings))
        started = time.monotonic()
        try:
            with get_session() as session:
                result.persisted_count = ListingRepository(session).replace_all(listings)
            stage.output_count = result.persisted_count
        except PersistenceError as e:
            self._record_failure(stage, e, "Failed to persist listings")
        except Exception as e:
            self._record_failure(stage, e, "Unexpected error persisting listings")
        stage.duration_seconds = time.monotonic() - started
        result.stages.append(stage)

    def _model(self, result: PipelineRunResult, listings: List[NormalizedListing]) -> None:
        if self.skip_modeling:
            logger.info("Modeling skipped", extra={"event": "pipeline.modeling.skipped"})
            return

        stage = StageStats(name="select", input_count=len(listings))
        started = time.monotonic()
        try:
            features = TextFeatureEncoder().encode_all(listings)
            result.labeled_count = int(features["target"].notna().sum())
            selection = ModelSelector(self.app_config.modeling).select(features)
        except ModelingError as e:
            stage.had_errors = True
            stage.error_message = str(e)
            result.modeling_error = str(e)
            logger.error(
                f"Modeling failed: {e}",
                extra={"event": "pipeline.stage.failed", "stage": "select", "error_type": type(e).__name__},
            )
        except Exception as e:
            stage.had_errors = True
            stage.error_message = str(e)
            result.modeling_error = str(e)
            logger.error(
                f"Unexpected modeling error: {e}",
                extra={"event": "pipeline.stage.failed", "stage": "select", "error_type": type(e).__name__},
                exc_info=True,
            )
        else:
            result.selection = selection
            result.best_model = selection.best_name
            result.predicted_count = len(selection.predictions)
            stage.output_count = len(selection.predictions)
            try:
                self._export_model(result, selection)
            except Exception as e:
                self._record_failure(stage, e, "Failed to write model outputs")
        finally:
            stage.duration_seconds = time.monotonic() - started
            result.stages.append(stage)

    def _export_model(self, result: PipelineRunResult, selection) -> None:
        output = self.app_config.output
        if output.write_csv:
            result.artifacts["report"] = write_model_report(selection.report, self.output_dir)
            result.artifacts["predictions"] = write_predictions(selection.predictions, self.output_dir)
        if output.save_model:
            result.artifacts["model"] = save_model(selection.model, self.output_dir)

    def _record_failure(self, stage: StageStats, error: Exception, message: str) -> None:
        stage.had_errors = True
        stage.error_message = str(error)
        logger.error(
            f"{message}: {error}",
            extra={"event": "pipeline.stage.failed", "stage": stage.name, "error_type": type(error).__name__},
            exc_info=True,
        )

    @contextmanager
    def _stage(self, result: PipelineRunResult, name: str) -> Iterator[StageStats]:
        stage = StageStats(name=name)
        started = time.monotonic()
        with log_context(stage=name):
            try:
                yield stage
            finally:
                stage.duration_seconds = time.monotonic() - started
                result.stages.append(stage)
                logger.info(
                    f"Stage {name} finished",
                    extra={
                        "event": "pipeline.stage.completed",
                        "input_count": stage.input_count,
                        "output_count": stage.output_count,
                        "duration_seconds": round(stage.duration_seconds, 3),
                        "had_errors": stage.had_errors,
                    },
                )

    def _finish(self, result: PipelineRunResult) -> PipelineRunResult:
        result.finish(utc_now())
        logger.info(
            "Pipeline run completed",
            extra={
                "event": "pipeline.run.completed",
                "duration_ms": int(result.total_duration_seconds * 1000),
                "scraped": result.scraped_count,
                "normalized": result.normalized_count,
                "persisted": result.persisted_count,
                "labeled": result.labeled_count,
                "predicted": result.predicted_count,
                "best_model": result.best_model,
                "had_errors": result.had_errors,
            },
        )
        return result
