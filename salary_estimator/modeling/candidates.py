"""Regression candidates sharing one preprocessing step.

Every candidate is an sklearn Pipeline: a ColumnTransformer that one-hot
encodes city and passes rating plus the indicators through, followed by the
regressor.
"""

from typing import Any, Dict, Sequence

from sklearn.compose import ColumnTransformer
from sklearn.dummy import DummyRegressor
from sklearn.ensemble import BaggingRegressor, GradientBoostingRegressor
from sklearn.linear_model import LinearRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder
from sklearn.tree import DecisionTreeRegressor

from salary_estimator.config.models import CANDIDATE_NAMES
from salary_estimator.features.rules import INDICATOR_NAMES

BASELINE_NAME = "baseline_mean"
LINEAR_NAME = "linear_regression"
TUNED_SUFFIX = "_tuned"
REGRESSOR_STEP = "regressor"


def build_preprocessor(indicator_columns: Sequence[str] = INDICATOR_NAMES) -> ColumnTransformer:
    """One-hot city, pass rating and indicators through unchanged.

    Cities unseen during fit encode as all zeros, so a CV fold missing a
    city never fails.
    """
    return ColumnTransformer(
        transformers=[
            ("city", OneHotEncoder(handle_unknown="ignore", sparse_output=False), ["city"]),
            ("numeric", "passthrough", ["rating", *indicator_columns]),
        ]
    )


def build_regressor(name: str, random_state: int):
    """Default-hyperparameter regressor for a model name."""
    if name == BASELINE_NAME:
        return DummyRegressor(strategy="mean")
    if name == LINEAR_NAME:
        return LinearRegression()
    if name == "decision_tree":
        return DecisionTreeRegressor(random_state=random_state)
    if name == "bagged_trees":
        return BaggingRegressor(estimator=DecisionTreeRegressor(), random_state=random_state)
    if name == "gradient_boosting":
        return GradientBoostingRegressor(random_state=random_state)
    raise ValueError(f"Unknown model: {name}. Supported: {BASELINE_NAME}, {LINEAR_NAME}, {', '.join(CANDIDATE_NAMES)}")


def build_pipeline(
    name: str, random_state: int, indicator_columns: Sequence[str] = INDICATOR_NAMES
) -> Pipeline:
    return Pipeline(
        steps=[
            ("preprocessor", build_preprocessor(indicator_columns)),
            (REGRESSOR_STEP, build_regressor(name, random_state)),
        ]
    )


def prefixed_grid(grid: Dict[str, Sequence[Any]]) -> Dict[str, list]:
    """Address grid parameters to the regressor step of the pipeline."""
    return {f"{REGRESSOR_STEP}__{param}": list(values) for param, values in grid.items()}


def regressor_params(pipeline: Pipeline, keys=None) -> Dict[str, Any]:
    """Regressor hyperparameters, optionally restricted to keys."""
    params = pipeline.named_steps[REGRESSOR_STEP].get_params(deep=False)
    if keys is not None:
        return {key: params[key] for key in keys if key in params}
    return {key: value for key, value in params.items() if not hasattr(value, "get_params")}
