"""Regression model selection for salary estimates."""

from .candidates import BASELINE_NAME, LINEAR_NAME, build_pipeline, build_preprocessor
from .exceptions import InsufficientDataError, ModelingError
from .models import PREDICTION_COLUMNS, REPORT_COLUMNS, ModelReport, ModelScore, SelectionResult
from .selector import ModelSelector, rmse, split_labeled, stratification_labels

__all__ = [
    "ModelSelector",
    "ModelReport",
    "ModelScore",
    "SelectionResult",
    "ModelingError",
    "InsufficientDataError",
    "PREDICTION_COLUMNS",
    "REPORT_COLUMNS",
    "BASELINE_NAME",
    "LINEAR_NAME",
    "build_pipeline",
    "build_preprocessor",
    "rmse",
    "split_labeled",
    "stratification_labels",
]
