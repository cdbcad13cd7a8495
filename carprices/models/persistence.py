"""
Save and load trained pipeline artifacts.

An artifact is a single joblib file holding a dict bundle:

    {"format": "carprices.pipeline", "version": 1,
     "schema": DataSchema.to_dict(), "pipeline": <fitted Pipeline>,
     "metadata": {...}}

`save_model` also writes `<artifact stem>.metadata.json` next to it for people
browsing the models folder; loading only reads the joblib bundle.
"""

from __future__ import annotations

import json
import logging
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import joblib
import numpy as np
import pandas as pd
import sklearn
from sklearn.pipeline import Pipeline

from carprices.exceptions import ArtifactFormatError
from carprices.schema import CAR_LISTING_SCHEMA, DataSchema

logger = logging.getLogger(__name__)

ARTIFACT_FORMAT = "carprices.pipeline"
ARTIFACT_VERSION = 1
_BUNDLE_KEYS = ("format", "version", "schema", "pipeline")


@dataclass(frozen=True)
class LoadedModel:
    """An inference-only pipeline with the input schema it was trained on."""

    pipeline: Pipeline
    schema: DataSchema
    metadata: Dict[str, Any] = field(default_factory=dict)
    path: Optional[str] = None

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        return self.pipeline.predict(X[self.schema.feature_names])


def metadata_path(path) -> Path:
    path = Path(path)
    return path.with_name(path.stem + ".metadata.json")


def save_model(pipeline: Pipeline, schema: DataSchema, path, metadata: Optional[Dict[str, Any]] = None) -> Path:
    """
    Persist a fitted pipeline and its input schema to a single artifact.

    Returns
    -------
    Path
        Location of the joblib artifact.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    meta = {
        "saved_at": pd.Timestamp.now().strftime("%Y-%m-%d %H:%M:%S"),
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "sklearn": sklearn.__version__,
    }
    meta.update(metadata or {})

    bundle = {
        "format": ARTIFACT_FORMAT,
        "version": ARTIFACT_VERSION,
        "schema": schema.to_dict(),
        "pipeline": pipeline,
        "metadata": meta,
    }
    joblib.dump(bundle, path, compress=3)

    sidecar = dict(meta, schema=schema.to_dict(), artifact=path.name)
    metadata_path(path).write_text(json.dumps(sidecar, indent=2, default=str), encoding="utf-8")

    logger.info("Saved model artifact to %s", path)
    return path


def load_model(path, expected_schema: DataSchema = CAR_LISTING_SCHEMA) -> LoadedModel:
    """
    Load an artifact written by `save_model`.

    Raises
    ------
    FileNotFoundError
        If `path` does not exist.
    ArtifactFormatError
        If the file is not a carprices bundle, has an unsupported version, or
        its schema does not match `expected_schema`.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model file not found at {path}. Run `carprices-train` first.")

    try:
        bundle = joblib.load(path)
    except Exception as exc:
        raise ArtifactFormatError(f"{path} is not a readable model artifact: {exc}") from exc

    if not isinstance(bundle, dict) or any(k not in bundle for k in _BUNDLE_KEYS):
        raise ArtifactFormatError(f"{path} is not a carprices model artifact")
    if bundle["format"] != ARTIFACT_FORMAT:
        raise ArtifactFormatError(f"{path} has unknown artifact format {bundle['format']!r}")
    if bundle["version"] != ARTIFACT_VERSION:
        raise ArtifactFormatError(
            f"{path} has artifact version {bundle['version']!r}; this release reads version {ARTIFACT_VERSION}"
        )

    try:
        schema = DataSchema.from_dict(bundle["schema"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ArtifactFormatError(f"{path} carries an invalid schema: {exc}") from exc

    if schema.signature() != expected_schema.signature() or schema.label != expected_schema.label:
        raise ArtifactFormatError(
            f"Schema mismatch for {path}: artifact expects {schema.signature()} "
            f"(label {schema.label!r}), caller expects {expected_schema.signature()} "
            f"(label {expected_schema.label!r})"
        )

    logger.info("Loaded model artifact from %s", path)
    return LoadedModel(
        pipeline=bundle["pipeline"],
        schema=schema,
        metadata=bundle.get("metadata") or {},
        path=str(path),
    )
