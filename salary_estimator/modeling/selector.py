"""Model selection over a shared train/test split.

The labeled rows are split once. Every model is scored on the same test
rows in dollars: a mean baseline, a linear regression and three tree
candidates (each also cross-validated on the training rows). The best tree
candidate is re-tuned with a grid search, the overall winner is refit on
every labeled row and used to predict the rows that have no salary.
"""

import logging
import math
import time
from typing import Dict, Optional, Sequence, Set, Tuple

import numpy as np
import pandas as pd
from sklearn.base import clone
from sklearn.metrics import mean_squared_error
from sklearn.model_selection import GridSearchCV, RepeatedKFold, cross_val_score, train_test_split
from sklearn.pipeline import Pipeline

from salary_estimator.config.models import CANDIDATE_NAMES, ModelingConfig
from salary_estimator.features.rules import FEATURE_COLUMNS, INDICATOR_NAMES, TARGET_COLUMN
from salary_estimator.logging import get_logger

from .candidates import (
    BASELINE_NAME,
    LINEAR_NAME,
    TUNED_SUFFIX,
    build_pipeline,
    prefixed_grid,
    regressor_params,
)
from .exceptions import InsufficientDataError
from .models import PREDICTION_COLUMNS, ModelReport, ModelScore, SelectionResult

logger = get_logger(__name__, component="modeling")

SCORING = "neg_root_mean_squared_error"


def rmse(y_true, y_pred) -> float:
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


def split_labeled(features: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split rows into (labeled, to_predict) by whether the target is present."""
    has_target = features[TARGET_COLUMN].notna()
    return features[has_target], features[~has_target]


def stratification_labels(y: pd.Series, max_bins: int, test_size: float) -> Optional[pd.Series]:
    """Quantile bins of the target usable for a stratified split.

    Starts at max_bins and reduces the bin count until every bin holds at
    least two rows and both sides of the split can hold one row per bin.
    Returns None when no binning of two or more bins works.
    """
    n_rows = len(y)
    n_test = math.ceil(n_rows * test_size)
    n_train = n_rows - n_test

    for bins in range(max_bins, 1, -1):
        try:
            labels = pd.qcut(y, q=bins, labels=False, duplicates="drop")
        except ValueError:
            continue
        counts = labels.value_counts()
        if len(counts) < 2:
            continue
        if counts.min() >= 2 and n_test >= len(counts) and n_train >= len(counts):
            return labels
    return None


class ModelSelector:
    """Fits, scores and selects salary regression models.

    Attributes:
        config: Split, cross-validation and tuning settings
        feature_columns: Model input columns (rating, city, indicators)
    """

    def __init__(
        self,
        modeling_config: Optional[ModelingConfig] = None,
        feature_columns: Sequence[str] = FEATURE_COLUMNS,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.config = modeling_config or ModelingConfig()
        self.feature_columns = list(feature_columns)
        self.indicator_columns = [c for c in self.feature_columns if c in INDICATOR_NAMES]
        self.logger = logger_instance or logger

    def select(self, features: pd.DataFrame) -> SelectionResult:
        """Run the full selection protocol.

        Args:
            features: Encoded listings (feature columns, target, company_name, title_text)

        Returns:
            SelectionResult with the refit winner, the report and predictions

        Raises:
            InsufficientDataError: If there are too few labeled rows to split and cross-validate
        """
        started = time.monotonic()
        labeled, to_predict = split_labeled(features)
        self._check_rows(len(labeled), self.config.min_labeled_rows, "labeled")

        X = labeled[self.feature_columns]
        y = labeled[TARGET_COLUMN].astype(float)

        labels = stratification_labels(y, self.config.stratify_bins, self.config.test_size)
        X_train, X_test, y_train, y_test = train_test_split(
            X,
            y,
            test_size=self.config.test_size,
            random_state=self.config.random_state,
            stratify=labels,
        )
        self._check_rows(len(X_train), self.config.cv_folds, "training")

        self.logger.info(
            f"Split {len(labeled)} labeled rows into {len(X_train)} train / {len(X_test)} test",
            extra={
                "event": "modeling.split.completed",
                "labeled": len(labeled),
                "to_predict": len(to_predict),
                "train": len(X_train),
                "test": len(X_test),
                "stratified": labels is not None,
            },
        )

        report = ModelReport()
        fitted: Dict[str, Pipeline] = {}

        for name in (BASELINE_NAME, LINEAR_NAME):
            pipeline = self._pipeline(name).fit(X_train, y_train)
            fitted[name] = pipeline
            self._record(
                report,
                ModelScore(
                    name=name,
                    rmse=rmse(y_test, pipeline.predict(X_test)),
                    params=regressor_params(pipeline),
                    selectable=name != BASELINE_NAME,
                ),
            )

        for name in CANDIDATE_NAMES:
            pipeline = self._pipeline(name)
            cv_scores = cross_val_score(
                pipeline,
                X_train,
                y_train,
                scoring=SCORING,
                cv=self._cv(),
                n_jobs=self.config.n_jobs,
                error_score="raise",
            )
            pipeline.fit(X_train, y_train)
            fitted[name] = pipeline
            self._record(
                report,
                ModelScore(
                    name=name,
                    rmse=rmse(y_test, pipeline.predict(X_test)),
                    cv_rmse=float(-np.mean(cv_scores)),
                    params=regressor_params(pipeline),
                ),
            )

        best_candidate = min(
            (report.get(name) for name in CANDIDATE_NAMES), key=lambda score: score.rmse
        )
        tuned = self._tune(best_candidate.name, X_train, y_train, X_test, y_test)
        if tuned is not None:
            tuned_score, tuned_pipeline = tuned
            fitted[tuned_score.name] = tuned_pipeline
            self._record(report, tuned_score)

        best = report.best()
        final_model = clone(fitted[best.name]).fit(X, y)

        self.logger.info(
            f"Selected {best.name} (test RMSE {best.rmse:,.0f}), refit on {len(labeled)} rows",
            extra={
                "event": "modeling.selection.completed",
                "best_model": best.name,
                "rmse": best.rmse,
                "baseline_rmse": report.get(BASELINE_NAME).rmse,
                "duration_seconds": round(time.monotonic() - started, 2),
            },
        )

        predictions, excluded = self.predict(final_model, to_predict, set(labeled["city"]))

        return SelectionResult(
            model=final_model,
            best_name=best.name,
            report=report,
            predictions=predictions,
            excluded_unseen_city=excluded,
            labeled_rows=len(labeled),
            train_rows=len(X_train),
            test_rows=len(X_test),
            stratified=labels is not None,
        )

    def predict(
        self, model: Pipeline, to_predict: pd.DataFrame, city_vocabulary: Set[str]
    ) -> Tuple[pd.DataFrame, int]:
        """Predict salaries for unlabeled rows whose city the model was trained on.

        Returns:
            (prediction table with PREDICTION_COLUMNS, number of rows excluded)
        """
        known = to_predict["city"].isin(city_vocabulary)
        excluded = to_predict[~known]
        if len(excluded):
            self.logger.warning(
                f"Excluding {len(excluded)} rows with cities not seen in training",
                extra={
                    "event": "modeling.prediction.excluded",
                    "rows": len(excluded),
                    "cities": sorted(excluded["city"].unique().tolist()),
                },
            )

        rows = to_predict[known]
        if rows.empty:
            return pd.DataFrame(columns=list(PREDICTION_COLUMNS)), len(excluded)

        predicted = model.predict(rows[self.feature_columns])
        table = rows[["company_name", "rating", "city", "title_text"]].copy()
        table["predicted_salary"] = np.rint(predicted).astype(int)
        table = table.reset_index(drop=True)

        self.logger.info(
            f"Predicted salaries for {len(table)} listings",
            extra={"event": "modeling.prediction.completed", "rows": len(table)},
        )
        return table[list(PREDICTION_COLUMNS)], len(excluded)

    def _tune(
        self, name: str, X_train, y_train, X_test, y_test
    ) -> Optional[Tuple[ModelScore, Pipeline]]:
        grid = self.config.tuning_grids.get(name)
        if not grid:
            self.logger.info(
                f"No tuning grid configured for {name}, skipping tuning",
                extra={"event": "modeling.tuning.skipped", "model": name},
            )
            return None

        search = GridSearchCV(
            self._pipeline(name),
            param_grid=prefixed_grid(grid),
            scoring=SCORING,
            cv=self._cv(),
            n_jobs=self.config.n_jobs,
            refit=True,
            error_score="raise",
        )
        search.fit(X_train, y_train)
        pipeline = search.best_estimator_

        score = ModelScore(
            name=f"{name}{TUNED_SUFFIX}",
            rmse=rmse(y_test, pipeline.predict(X_test)),
            cv_rmse=float(-search.best_score_),
            params=regressor_params(pipeline, keys=grid.keys()),
        )
        self.logger.info(
            f"Tuned {name} over {len(search.cv_results_['params'])} parameter combinations",
            extra={"event": "modeling.tuning.completed", "model": name, "best_params": score.params},
        )
        return score, pipeline

    def _pipeline(self, name: str) -> Pipeline:
        return build_pipeline(name, self.config.random_state, self.indicator_columns)

    def _cv(self) -> RepeatedKFold:
        return RepeatedKFold(
            n_splits=self.config.cv_folds,
            n_repeats=self.config.cv_repeats,
            random_state=self.config.random_state,
        )

    def _record(self, report: ModelReport, score: ModelScore) -> None:
        report.add(score)
        self.logger.info(
            f"Scored {score.name}: test RMSE {score.rmse:,.0f}",
            extra={
                "event": "modeling.candidate.scored",
                "model": score.name,
                "rmse": score.rmse,
                "cv_rmse": score.cv_rmse,
            },
        )

    def _check_rows(self, rows: int, required: int, kind: str) -> None:
        if rows < required:
            self.logger.error(
                f"Only {rows} {kind} rows, at least {required} required",
                extra={"event": "modeling.insufficient_data", "rows": rows, "required": required},
            )
            raise InsufficientDataError(
                f"Need at least {required} {kind} rows to select a model, got {rows}",
                labeled_rows=rows,
                required_rows=required,
            )
