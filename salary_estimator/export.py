"""File artifacts for a run: dataset, model report, predictions and the model.

CSV files are written with pandas and always carry a fixed column set so
downstream consumers can rely on it. The fitted model is saved with joblib.
"""

from pathlib import Path
from typing import Iterable, List, Union

import joblib
import pandas as pd
from pydantic import ValidationError
from sklearn.pipeline import Pipeline

from salary_estimator.domain.models import DATASET_COLUMNS, NormalizedListing
from salary_estimator.logging import get_logger
from salary_estimator.modeling.models import PREDICTION_COLUMNS, ModelReport
from salary_estimator.normalization import to_dataset_frame

logger = get_logger(__name__, component="export")

DATASET_FILENAME = "dataset.csv"
MODEL_REPORT_FILENAME = "model_report.csv"
PREDICTIONS_FILENAME = "predictions.csv"
MODEL_FILENAME = "model.joblib"

PathLike = Union[str, Path]


class DatasetFormatError(Exception):
    """A dataset file does not have the published column set."""

    def __init__(self, message: str, path: PathLike) -> None:
        super().__init__(message)
        self.path = Path(path)


def _prepare(output_dir: PathLike, filename: str) -> Path:
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / filename


def write_dataset(listings: Iterable[NormalizedListing], output_dir: PathLike) -> Path:
    """Write the published dataset (exactly DATASET_COLUMNS) to dataset.csv."""
    path = _prepare(output_dir, DATASET_FILENAME)
    frame = to_dataset_frame(listings)
    frame.to_csv(path, index=False)
    logger.info(
        f"Wrote {len(frame)} listings to {path}",
        extra={"event": "export.dataset.written", "path": str(path), "rows": len(frame)},
    )
    return path


def write_model_report(report: ModelReport, output_dir: PathLike) -> Path:
    path = _prepare(output_dir, MODEL_REPORT_FILENAME)
    frame = report.to_frame()
    frame.to_csv(path, index=False)
    logger.info(
        f"Wrote model report to {path}",
        extra={"event": "export.report.written", "path": str(path), "models": len(frame)},
    )
    return path


def write_predictions(predictions: pd.DataFrame, output_dir: PathLike) -> Path:
    path = _prepare(output_dir, PREDICTIONS_FILENAME)
    predictions.reindex(columns=list(PREDICTION_COLUMNS)).to_csv(path, index=False)
    logger.info(
        f"Wrote {len(predictions)} predictions to {path}",
        extra={"event": "export.predictions.written", "path": str(path), "rows": len(predictions)},
    )
    return path


def save_model(model: Pipeline, output_dir: PathLike) -> Path:
    """Persist a fitted pipeline with joblib.dump."""
    path = _prepare(output_dir, MODEL_FILENAME)
    joblib.dump(model, path)
    logger.info(f"Saved model to {path}", extra={"event": "export.model.saved", "path": str(path)})
    return path


def load_model(path: PathLike) -> Pipeline:
    return joblib.load(path)


def read_dataset(path: PathLike) -> List[NormalizedListing]:
    """Read a published dataset CSV back into NormalizedListings.

    Rows that no longer validate (e.g. a hand-edited rating outside [1, 5])
    are skipped with a warning.

    Raises:
        DatasetFormatError: If the file's columns differ from DATASET_COLUMNS
        FileNotFoundError: If the file does not exist
    """
    frame = pd.read_csv(
        path,
        dtype={
            "url": str,
            "description_text": str,
            "title_text": str,
            "company_name": str,
            "company_location": str,
            "location_code": str,
            "city": str,
        },
        keep_default_na=False,
        na_values=[""],
    )

    if tuple(frame.columns) != DATASET_COLUMNS:
        raise DatasetFormatError(
            f"Dataset columns {list(frame.columns)} do not match {list(DATASET_COLUMNS)}",
            path=path,
        )

    listings: List[NormalizedListing] = []
    records = frame.astype(object).where(frame.notna(), None).to_dict(orient="records")
    for line_number, record in enumerate(records, start=2):
        if record["salary_estimate"] is not None:
            record["salary_estimate"] = int(record["salary_estimate"])
        try:
            listings.append(NormalizedListing(**record))
        except ValidationError as e:
            logger.warning(
                f"Skipping invalid dataset row {line_number}: {e.error_count()} errors",
                extra={"event": "export.dataset.invalid_row", "path": str(path), "line": line_number},
            )

    logger.info(
        f"Read {len(listings)} listings from {path}",
        extra={"event": "export.dataset.read", "path": str(path), "rows": len(listings)},
    )
    return listings
