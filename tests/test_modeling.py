"""Unit tests for model selection."""

import numpy as np
import pandas as pd
import pytest

from salary_estimator.config.models import CANDIDATE_NAMES, ModelingConfig
from salary_estimator.domain.models import NormalizedListing
from salary_estimator.features import FEATURE_COLUMNS, TextFeatureEncoder
from salary_estimator.modeling import (
    BASELINE_NAME,
    LINEAR_NAME,
    PREDICTION_COLUMNS,
    REPORT_COLUMNS,
    InsufficientDataError,
    ModelReport,
    ModelScore,
    ModelSelector,
    build_pipeline,
    rmse,
    split_labeled,
    stratification_labels,
)

CITY_CODES = {"Austin": "1139761", "Boston": "1154532", "Miami": "1154170"}


def make_listing(index: int, city: str, salary, python: bool, rating: float) -> NormalizedListing:
    return NormalizedListing(
        url=f"https://example.com/{index}",
        description_text="Python and SQL" if python else "SQL and Excel",
        title_text="Senior Data Scientist" if index % 3 == 0 else "Data Scientist",
        rating=rating,
        company_name=f"Company {index}",
        company_location=f"{city}, XX",
        salary_estimate=salary,
        location_code=CITY_CODES[city],
        city=city,
    )


def labeled_listings(count: int = 40):
    rng = np.random.default_rng(0)
    listings = []
    for i in range(count):
        city = "Austin" if i % 2 == 0 else "Boston"
        python = (i // 2) % 2 == 0
        rating = 3.0 + (i % 5) * 0.4
        salary = (
            90000
            + (20000 if python else 0)
            + (10000 if city == "Boston" else 0)
            + int(rating * 5000)
            + int(rng.integers(-3000, 3000))
        )
        listings.append(make_listing(i, city, salary, python, rating))
    return listings


@pytest.fixture
def modeling_config():
    return ModelingConfig(
        test_size=0.2,
        cv_folds=2,
        cv_repeats=1,
        stratify_bins=3,
        min_labeled_rows=8,
        tuning_grids={
            "decision_tree": {"max_depth": [2, 3]},
            "bagged_trees": {"n_estimators": [5, 10]},
            "gradient_boosting": {"n_estimators": [10, 20], "max_depth": [1]},
        },
    )


@pytest.fixture
def features():
    listings = labeled_listings()
    listings += [
        make_listing(100, "Austin", None, True, 4.0),
        make_listing(101, "Boston", None, False, 3.5),
        make_listing(102, "Miami", None, True, 4.2),
    ]
    return TextFeatureEncoder().encode_all(listings)


class TestHelpers:
    def test_rmse(self):
        assert rmse([1.0, 2.0], [1.0, 4.0]) == pytest.approx(np.sqrt(2.0))

    def test_split_labeled(self, features):
        labeled, to_predict = split_labeled(features)

        assert len(labeled) == 40
        assert len(to_predict) == 3
        assert to_predict["target"].isna().all()


class TestStratificationLabels:
    def test_uses_max_bins_when_split_allows(self):
        labels = stratification_labels(pd.Series(range(40), dtype=float), max_bins=5, test_size=0.25)
        assert labels.nunique() == 5

    def test_reduces_bins_for_small_test_split(self):
        # 20 rows at 10% leaves two test rows, so only two bins fit
        labels = stratification_labels(pd.Series(range(20), dtype=float), max_bins=5, test_size=0.1)
        assert labels.nunique() == 2

    def test_returns_none_when_no_binning_works(self):
        assert stratification_labels(pd.Series([1.0, 2.0, 3.0]), max_bins=5, test_size=0.1) is None

    def test_single_bin_is_never_used(self):
        assert stratification_labels(pd.Series(range(40), dtype=float), max_bins=1, test_size=0.2) is None


class TestModelReport:
    def test_best_skips_unselectable(self):
        report = ModelReport()
        report.add(ModelScore(name=BASELINE_NAME, rmse=1.0, selectable=False))
        report.add(ModelScore(name=LINEAR_NAME, rmse=5.0))
        report.add(ModelScore(name="decision_tree", rmse=3.0))

        assert report.best().name == "decision_tree"

    def test_best_prefers_earlier_entry_on_tie(self):
        report = ModelReport()
        report.add(ModelScore(name="decision_tree", rmse=3.0))
        report.add(ModelScore(name="decision_tree_tuned", rmse=3.0))

        assert report.best().name == "decision_tree"

    def test_best_without_candidates_raises(self):
        report = ModelReport([ModelScore(name=BASELINE_NAME, rmse=1.0, selectable=False)])
        with pytest.raises(ValueError):
            report.best()

    def test_to_frame(self):
        report = ModelReport(
            [ModelScore(name=LINEAR_NAME, rmse=2.5), ModelScore(name="decision_tree", rmse=3.0, cv_rmse=3.2)]
        )
        frame = report.to_frame()

        assert tuple(frame.columns) == REPORT_COLUMNS
        assert frame["model"].tolist() == [LINEAR_NAME, "decision_tree"]
        assert frame["cv_rmse"].isna().tolist() == [True, False]


class TestBuildPipeline:
    def test_unknown_model_raises(self):
        with pytest.raises(ValueError, match="Unknown model"):
            build_pipeline("random_forest", random_state=1)

    def test_unseen_city_does_not_fail(self, features):
        labeled, _ = split_labeled(features)
        X = labeled[list(FEATURE_COLUMNS)]
        pipeline = build_pipeline(LINEAR_NAME, random_state=1)
        pipeline.fit(X, labeled["target"].astype(float))

        row = X.iloc[[0]].copy()
        row["city"] = "Nowhere"
        assert len(pipeline.predict(row)) == 1


class TestModelSelector:
    """Tests for ModelSelector.select."""

    def test_too_few_labeled_rows(self, modeling_config):
        frame = TextFeatureEncoder().encode_all(labeled_listings(5))
        selector = ModelSelector(modeling_config)

        with pytest.raises(InsufficientDataError) as exc_info:
            selector.select(frame)

        assert exc_info.value.labeled_rows == 5
        assert exc_info.value.required_rows == 8

    def test_training_rows_below_cv_folds(self):
        config = ModelingConfig(test_size=0.2, cv_folds=5, min_labeled_rows=4, tuning_grids={})
        frame = TextFeatureEncoder().encode_all(labeled_listings(5))

        with pytest.raises(InsufficientDataError) as exc_info:
            ModelSelector(config).select(frame)

        assert exc_info.value.required_rows == 5

    def test_select_reports_every_model(self, modeling_config, features):
        result = ModelSelector(modeling_config).select(features)
        names = [score.name for score in result.report.scores]

        assert names[:5] == [BASELINE_NAME, LINEAR_NAME, *CANDIDATE_NAMES]
        assert len(names) == 6
        assert names[5].endswith("_tuned")
        assert names[5][: -len("_tuned")] in CANDIDATE_NAMES

    def test_cross_validation_only_on_tree_candidates(self, modeling_config, features):
        report = ModelSelector(modeling_config).select(features).report

        assert report.get(BASELINE_NAME).cv_rmse is None
        assert report.get(LINEAR_NAME).cv_rmse is None
        for name in CANDIDATE_NAMES:
            assert report.get(name).cv_rmse > 0

    def test_best_is_never_baseline(self, modeling_config, features):
        result = ModelSelector(modeling_config).select(features)

        assert result.best_name != BASELINE_NAME
        assert result.best_name == result.report.best().name

    def test_split_sizes(self, modeling_config, features):
        result = ModelSelector(modeling_config).select(features)

        assert result.labeled_rows == 40
        assert result.test_rows == 8
        assert result.train_rows == 32
        assert result.stratified is True

    def test_predictions_only_for_unlabeled_seen_cities(self, modeling_config, features):
        result = ModelSelector(modeling_config).select(features)
        predictions = result.predictions

        assert tuple(predictions.columns) == PREDICTION_COLUMNS
        assert predictions["company_name"].tolist() == ["Company 100", "Company 101"]
        assert set(predictions["city"]) == {"Austin", "Boston"}
        assert result.excluded_unseen_city == 1
        assert (predictions["predicted_salary"] > 0).all()

    def test_no_unlabeled_rows(self, modeling_config):
        frame = TextFeatureEncoder().encode_all(labeled_listings())
        result = ModelSelector(modeling_config).select(frame)

        assert result.predictions.empty
        assert tuple(result.predictions.columns) == PREDICTION_COLUMNS

    def test_without_tuning_grids(self, modeling_config, features):
        config = modeling_config.model_copy(update={"tuning_grids": {}})
        result = ModelSelector(config).select(features)

        assert len(result.report.scores) == 5
        assert not any(score.name.endswith("_tuned") for score in result.report.scores)

    def test_selection_is_deterministic(self, modeling_config, features):
        first = ModelSelector(modeling_config).select(features)
        second = ModelSelector(modeling_config).select(features)

        assert first.best_name == second.best_name
        assert first.report.to_frame().equals(second.report.to_frame())
        assert first.predictions.equals(second.predictions)

    def test_refit_model_covers_every_labeled_city(self, modeling_config, features):
        result = ModelSelector(modeling_config).select(features)
        encoder = result.model.named_steps["preprocessor"].named_transformers_["city"]

        assert set(encoder.categories_[0]) == {"Austin", "Boston"}
