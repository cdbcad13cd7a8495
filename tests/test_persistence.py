import json

import joblib
import numpy as np
import pytest

from carprices.exceptions import ArtifactFormatError
from carprices.models.persistence import ARTIFACT_FORMAT, load_model, metadata_path, save_model
from carprices.schema import CAR_LISTING_SCHEMA, ColumnSpec, DataSchema


def test_round_trip_reproduces_predictions(training_result, model_path, listings_df):
    sample = listings_df.drop(columns=["Price"]).head(25)
    before = training_result.pipeline.predict(sample)

    loaded = load_model(model_path)
    np.testing.assert_allclose(loaded.predict(sample), before)
    assert loaded.schema == CAR_LISTING_SCHEMA
    assert loaded.path == model_path


def test_save_writes_metadata_sidecar(training_result, tmp_path):
    path = save_model(training_result.pipeline, CAR_LISTING_SCHEMA, tmp_path / "nested" / "m.joblib",
                      metadata={"model_name": "poisson"})
    assert path.exists()
    sidecar = json.loads(metadata_path(path).read_text())
    assert sidecar["model_name"] == "poisson"
    assert "sklearn" in sidecar
    assert sidecar["schema"]["label"] == "Price"
    assert load_model(path).metadata["model_name"] == "poisson"


def test_missing_artifact(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_model(tmp_path / "missing.joblib")


def test_unreadable_artifact(tmp_path):
    path = tmp_path / "garbage.joblib"
    path.write_bytes(b"definitely not a pickle")
    with pytest.raises(ArtifactFormatError):
        load_model(path)


def test_foreign_object(tmp_path):
    path = tmp_path / "foreign.joblib"
    joblib.dump({"weights": [1, 2, 3]}, path)
    with pytest.raises(ArtifactFormatError):
        load_model(path)


def test_unsupported_version(training_result, tmp_path):
    path = tmp_path / "future.joblib"
    joblib.dump(
        {
            "format": ARTIFACT_FORMAT,
            "version": 99,
            "schema": CAR_LISTING_SCHEMA.to_dict(),
            "pipeline": training_result.pipeline,
        },
        path,
    )
    with pytest.raises(ArtifactFormatError, match="version"):
        load_model(path)


def test_schema_mismatch_fails_loudly(model_path):
    expected = DataSchema(
        columns=(
            ColumnSpec("Price", "float", 0),
            ColumnSpec("Year", "float", 1),
            ColumnSpec("Mileage", "float", 2),
            ColumnSpec("Make", "str", 6),
            ColumnSpec("Trim", "str", 7),
        ),
        label="Price",
    )
    with pytest.raises(ArtifactFormatError, match="Schema mismatch"):
        load_model(model_path, expected_schema=expected)


def test_dtype_mismatch_fails_loudly(model_path):
    columns = tuple(
        ColumnSpec(c.name, "str" if c.name == "Year" else c.dtype, c.index) for c in CAR_LISTING_SCHEMA.columns
    )
    with pytest.raises(ArtifactFormatError):
        load_model(model_path, expected_schema=DataSchema(columns=columns, label="Price"))
