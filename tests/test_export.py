"""Unit tests for run artifacts."""

import pandas as pd
import pytest
from sklearn.dummy import DummyRegressor

from salary_estimator.domain.models import DATASET_COLUMNS, NormalizedListing
from salary_estimator.export import (
    DATASET_FILENAME,
    DatasetFormatError,
    load_model,
    read_dataset,
    save_model,
    write_dataset,
    write_model_report,
    write_predictions,
)
from salary_estimator.modeling import PREDICTION_COLUMNS, REPORT_COLUMNS, ModelReport, ModelScore


def make_listing(index: int, **overrides) -> NormalizedListing:
    data = {
        "url": f"https://example.com/{index}",
        "description_text": "Python, R and \"SQL\"\nacross lines",
        "title_text": "Data Scientist",
        "rating": 3.9,
        "company_name": "Acme, Inc.",
        "company_location": "Boston, MA",
        "salary_estimate": 95000,
        "location_code": "1154532",
        "city": "Boston",
    }
    data.update(overrides)
    return NormalizedListing(**data)


class TestDatasetFile:
    def test_write_creates_directory_and_header(self, tmp_path):
        path = write_dataset([make_listing(1)], tmp_path / "out")

        assert path == tmp_path / "out" / DATASET_FILENAME
        assert tuple(pd.read_csv(path).columns) == DATASET_COLUMNS

    def test_round_trip(self, tmp_path):
        listings = [
            make_listing(1),
            make_listing(2, salary_estimate=None, company_location=None),
            make_listing(3, rating=5.0, description_text=None),
        ]

        assert read_dataset(write_dataset(listings, tmp_path)) == listings

    def test_location_codes_stay_strings(self, tmp_path):
        [listing] = read_dataset(write_dataset([make_listing(1)], tmp_path))
        assert listing.location_code == "1154532"

    def test_empty_dataset(self, tmp_path):
        assert read_dataset(write_dataset([], tmp_path)) == []

    def test_wrong_columns_raise(self, tmp_path):
        path = tmp_path / "bad.csv"
        pd.DataFrame({"url": ["https://example.com/1"], "rating": [4.0]}).to_csv(path, index=False)

        with pytest.raises(DatasetFormatError) as exc_info:
            read_dataset(path)

        assert exc_info.value.path == path

    def test_invalid_rows_are_skipped(self, tmp_path):
        path = write_dataset([make_listing(1), make_listing(2)], tmp_path)
        frame = pd.read_csv(path, dtype=str)
        frame.loc[0, "rating"] = "7.5"
        frame.to_csv(path, index=False)

        listings = read_dataset(path)

        assert [l.url for l in listings] == ["https://example.com/2"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_dataset(tmp_path / "missing.csv")


class TestModelArtifacts:
    def test_write_model_report(self, tmp_path):
        report = ModelReport([ModelScore(name="linear_regression", rmse=1234.5)])
        frame = pd.read_csv(write_model_report(report, tmp_path))

        assert tuple(frame.columns) == REPORT_COLUMNS
        assert frame.loc[0, "model"] == "linear_regression"

    def test_write_empty_predictions_keeps_header(self, tmp_path):
        path = write_predictions(pd.DataFrame(columns=list(PREDICTION_COLUMNS)), tmp_path)

        assert tuple(pd.read_csv(path).columns) == PREDICTION_COLUMNS

    def test_save_and_load_model(self, tmp_path):
        model = DummyRegressor(strategy="constant", constant=42.0).fit([[0.0], [1.0]], [1.0, 2.0])

        loaded = load_model(save_model(model, tmp_path))

        assert loaded.predict([[5.0]])[0] == 42.0
