"""Main entry point for the salary estimator."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import os
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from salary_estimator.config.environment import EnvironmentConfig
from salary_estimator.config.exceptions import ConfigurationError
from salary_estimator.config.loader import load_config
from salary_estimator.config.models import AppConfig
from salary_estimator.export import DatasetFormatError
from salary_estimator.logging import get_logger
from salary_estimator.logging.config import configure_logging
from salary_estimator.persistence.database import close_database, init_database
from salary_estimator.persistence.exceptions import DatabaseConnectionError
from salary_estimator.pipeline import PipelineRunResult, SalaryPipeline

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)
    env_config.log_level = (
        log_level_override or env_config.log_level or app_config.logging.level or "INFO"
    )
    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Salary Estimator - scrape job listings and predict missing salary estimates"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml, then built-in defaults)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--dataset",
        type=Path,
        default=None,
        help="Model a published dataset CSV instead of scraping",
    )
    parser.add_argument(
        "--skip-modeling",
        action="store_true",
        help="Publish the scraped dataset without fitting models",
    )
    return parser


def summarize(result: PipelineRunResult) -> str:
    summary = (
        f"{result.scraped_count} scraped, "
        f"{result.normalized_count} normalized, "
        f"{result.persisted_count} persisted, "
        f"{result.labeled_count} labeled, "
        f"{result.predicted_count} predicted"
    )
    if result.best_model:
        summary += f", best model {result.best_model}"
    if result.modeling_error:
        summary += f" (modeling failed: {result.modeling_error})"
    return summary


def run(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> PipelineRunResult:
    """Run the pipeline in dataset mode (--dataset) or scrape mode."""
    if args.dataset:
        pipeline = SalaryPipeline(
            app_config, env_config, persist=False, skip_modeling=args.skip_modeling
        )
        return pipeline.run_from_dataset(args.dataset)

    init_database(env_config.database_url)
    try:
        return SalaryPipeline(app_config, env_config, skip_modeling=args.skip_modeling).run_once()
    finally:
        close_database()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the salary estimator.

    Returns:
        Exit code: 0 for a clean run, 1 for configuration, dataset or
        database errors and for runs where any stage degraded.
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )

        logger.info(
            "Salary estimator starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "mode": "dataset" if args.dataset else "scrape",
                "skip_modeling": args.skip_modeling,
            },
        )

        result = run(args, app_config, env_config)

        logger.info(
            f"Run completed: {summarize(result)}",
            extra={
                "event": "service.run.completed",
                "duration_seconds": result.total_duration_seconds,
                "uptime_seconds": round(time.time() - start_time, 2),
                "had_errors": result.had_errors,
                "artifacts": {kind: str(path) for kind, path in result.artifacts.items()},
            },
        )
        return 1 if result.had_errors else 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(f"Configuration error: {e}", extra={"event": "config.error"})
        return 1
    except (DatasetFormatError, FileNotFoundError) as e:
        print(f"Dataset Error: {e}", file=sys.stderr)
        logger.error(
            f"Dataset error: {e}",
            extra={"event": "dataset.error", "error_type": type(e).__name__},
        )
        return 1
    except DatabaseConnectionError as e:
        print(f"Database Error: {e}", file=sys.stderr)
        logger.error(f"Database error: {e}", extra={"event": "database.error"})
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during run",
            extra={"event": "service.run.failed", "error_type": type(e).__name__},
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
