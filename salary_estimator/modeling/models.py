"""Result types for model selection."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd
from sklearn.pipeline import Pipeline

PREDICTION_COLUMNS = ("company_name", "rating", "city", "title_text", "predicted_salary")
REPORT_COLUMNS = ("model", "rmse", "cv_rmse")


@dataclass
class ModelScore:
    """
    Evaluation of one model on the shared test split.

    Attributes:
        name: Model name (e.g. "gradient_boosting", "gradient_boosting_tuned")
        rmse: Test-set RMSE in dollars
        cv_rmse: Mean repeated k-fold RMSE on the training split, when cross-validated
        params: Hyperparameters of the regressor step
        selectable: False for the mean baseline, which is reported but never chosen
    """

    name: str
    rmse: float
    cv_rmse: Optional[float] = None
    params: Dict[str, Any] = field(default_factory=dict)
    selectable: bool = True


@dataclass
class ModelReport:
    """Ordered scores for every evaluated model."""

    scores: List[ModelScore] = field(default_factory=list)

    def add(self, score: ModelScore) -> None:
        self.scores.append(score)

    def get(self, name: str) -> Optional[ModelScore]:
        for score in self.scores:
            if score.name == name:
                return score
        return None

    def best(self) -> ModelScore:
        """Lowest test RMSE among selectable models; earlier entries win ties."""
        candidates = [score for score in self.scores if score.selectable]
        if not candidates:
            raise ValueError("No selectable models in report")
        return min(candidates, key=lambda score: score.rmse)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [{"model": s.name, "rmse": s.rmse, "cv_rmse": s.cv_rmse} for s in self.scores],
            columns=list(REPORT_COLUMNS),
        )


@dataclass
class SelectionResult:
    """
    Outcome of ModelSelector.select.

    Attributes:
        model: Winning pipeline, refit on every labeled row
        best_name: Name of the winning model in the report
        report: Scores for baseline and every candidate
        predictions: Prediction table for unlabeled rows (PREDICTION_COLUMNS)
        excluded_unseen_city: Unlabeled rows left out because their city was never trained on
        labeled_rows: Rows with a salary estimate
        train_rows: Rows in the training split
        test_rows: Rows in the test split
        stratified: Whether the split was stratified by target bins
    """

    model: Pipeline
    best_name: str
    report: ModelReport
    predictions: pd.DataFrame
    excluded_unseen_city: int = 0
    labeled_rows: int = 0
    train_rows: int = 0
    test_rows: int = 0
    stratified: bool = False
