"""
Feature pipeline for the car listings dataset.

The preprocessor one-hot encodes each categorical column, min-max scales the
numeric columns and concatenates every block into a single (sparse) feature
matrix. It is fit once on the training partition; the fitted object is then
reused unchanged for the test partition and for inference.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from sklearn.compose import ColumnTransformer
from sklearn.preprocessing import MinMaxScaler, OneHotEncoder

_HANDLE_UNKNOWN = ("ignore", "error")


@dataclass(frozen=True)
class FeatureConfig:
    """
    Options of the feature pipeline.

    Attributes
    ----------
    numeric_columns : tuple of str
        Numeric inputs, placed first in the concatenated feature vector.
    categorical_columns : tuple of str
        Inputs one-hot encoded into one indicator block each.
    normalize : bool
        Min-max scale every feature dimension with bounds captured at fit time.
    handle_unknown : {"ignore", "error"}
        "ignore" encodes a category unseen at fit time as an all-zero block.
    """

    numeric_columns: Tuple[str, ...] = ("Year", "Mileage")
    categorical_columns: Tuple[str, ...] = ("Make", "Model")
    normalize: bool = True
    handle_unknown: str = "ignore"

    def __post_init__(self):
        if not self.numeric_columns and not self.categorical_columns:
            raise ValueError("FeatureConfig needs at least one input column")
        overlap = set(self.numeric_columns) & set(self.categorical_columns)
        if overlap:
            raise ValueError(f"Columns declared both numeric and categorical: {sorted(overlap)}")
        if self.handle_unknown not in _HANDLE_UNKNOWN:
            raise ValueError(f"handle_unknown must be one of {_HANDLE_UNKNOWN}, got {self.handle_unknown!r}")

    @property
    def input_columns(self) -> List[str]:
        return list(self.numeric_columns) + list(self.categorical_columns)


def build_preprocessor(config: FeatureConfig = FeatureConfig()) -> ColumnTransformer:
    """
    Create the unfitted encode -> concatenate -> normalize transformer.

    One-hot indicators already span [0, 1], so scaling only the numeric block
    yields the min-max normalisation of the whole concatenated vector while
    keeping the indicator blocks sparse.
    """
    transformers = []
    if config.numeric_columns:
        numeric = MinMaxScaler() if config.normalize else "passthrough"
        transformers.append(("numeric", numeric, list(config.numeric_columns)))

    for col in config.categorical_columns:
        encoder = OneHotEncoder(
            handle_unknown=config.handle_unknown,
            sparse_output=True,
            dtype=float,
        )
        transformers.append((f"{col.lower()}_encoded", encoder, [col]))

    return ColumnTransformer(
        transformers=transformers,
        remainder="drop",
        sparse_threshold=1.0,
    )


def feature_names(preprocessor: ColumnTransformer) -> List[str]:
    """Names of the fitted output dimensions, in feature-vector order."""
    return [str(n) for n in preprocessor.get_feature_names_out()]
