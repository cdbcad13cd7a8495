"""
Evaluation utilities: regression metrics and K-Fold cross-validation.

Usage
-----
from carprices.models.evaluate import evaluate_model, cross_validate_model
metrics = evaluate_model(fitted_pipeline, test_df)
cv = cross_validate_model(unfitted_pipeline, df, n_folds=5)
print(cv.mean_r_squared)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

import numpy as np
import pandas as pd
from sklearn.base import clone
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score
from sklearn.model_selection import KFold
from sklearn.pipeline import Pipeline

from carprices.schema import CAR_LISTING_SCHEMA

logger = logging.getLogger(__name__)

LABEL = CAR_LISTING_SCHEMA.label


@dataclass(frozen=True)
class RegressionMetrics:
    r_squared: float
    mean_absolute_error: float
    mean_squared_error: float
    root_mean_squared_error: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "r_squared": self.r_squared,
            "mean_absolute_error": self.mean_absolute_error,
            "mean_squared_error": self.mean_squared_error,
            "root_mean_squared_error": self.root_mean_squared_error,
        }


@dataclass(frozen=True)
class CrossValidationResult:
    fold_metrics: List[RegressionMetrics]

    @property
    def r_squared(self) -> np.ndarray:
        return np.array([m.r_squared for m in self.fold_metrics])

    @property
    def mean_r_squared(self) -> float:
        return float(self.r_squared.mean())

    @property
    def std_r_squared(self) -> float:
        return float(self.r_squared.std())

    def to_dict(self) -> Dict:
        return {
            "n_folds": len(self.fold_metrics),
            "mean_r_squared": self.mean_r_squared,
            "std_r_squared": self.std_r_squared,
            "folds": [m.to_dict() for m in self.fold_metrics],
        }


def regression_metrics(y_true, y_pred) -> RegressionMetrics:
    """R² (1 - RSS/TSS), MAE, MSE and RMSE of a set of predictions."""
    mse = mean_squared_error(y_true, y_pred)
    return RegressionMetrics(
        r_squared=float(r2_score(y_true, y_pred)),
        mean_absolute_error=float(mean_absolute_error(y_true, y_pred)),
        mean_squared_error=float(mse),
        root_mean_squared_error=float(np.sqrt(mse)),
    )


def evaluate_model(pipeline: Pipeline, df: pd.DataFrame, label: str = LABEL) -> RegressionMetrics:
    """Score a fitted pipeline on labelled rows."""
    X = df.drop(columns=[label])
    y = df[label]
    return regression_metrics(y, pipeline.predict(X))


def cross_validate_model(
    pipeline: Pipeline,
    df: pd.DataFrame,
    label: str = LABEL,
    n_folds: int = 5,
    random_state: int = 42,
) -> CrossValidationResult:
    """
    Run K-fold cross-validation of an (unfitted) pipeline.

    Each fold fits a fresh clone of `pipeline` on the other k-1 folds, so the
    feature transforms are refit per fold and never see the held-out rows.

    Parameters
    ----------
    pipeline : Pipeline
        Template pipeline; it is cloned, never fitted in place.
    df : pd.DataFrame
        Full labelled dataset.
    label : str
    n_folds : int
    random_state : int

    Returns
    -------
    CrossValidationResult
        Per-fold metrics; `mean_r_squared` is the generalisation estimate.
    """
    if n_folds < 2:
        raise ValueError(f"n_folds must be at least 2, got {n_folds}")
    if n_folds > len(df):
        raise ValueError(f"Cannot split {len(df)} rows into {n_folds} folds")

    X = df.drop(columns=[label])
    y = df[label]

    kf = KFold(n_splits=n_folds, shuffle=True, random_state=random_state)
    fold_metrics = []

    for fold_idx, (train_idx, val_idx) in enumerate(kf.split(X), start=1):
        model = clone(pipeline)
        model.fit(X.iloc[train_idx], y.iloc[train_idx])

        metrics = regression_metrics(y.iloc[val_idx], model.predict(X.iloc[val_idx]))
        fold_metrics.append(metrics)

        logger.info("Fold %d/%d: R2=%.4f, MAE=%.2f, RMSE=%.2f",
                    fold_idx, n_folds, metrics.r_squared,
                    metrics.mean_absolute_error, metrics.root_mean_squared_error)

    result = CrossValidationResult(fold_metrics=fold_metrics)
    logger.info("Cross-validation: mean R2=%.4f, std=%.4f", result.mean_r_squared, result.std_r_squared)
    return result
