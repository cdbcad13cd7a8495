"""
Train the car price model.

Usage (from project root)
-------------------------
carprices-train data/true_car_listings.csv models/true_car_listings-model.joblib

# or
python -m carprices.models.train --folds 5 --seed 42
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pandas as pd
from sklearn.linear_model import PoissonRegressor
from sklearn.model_selection import train_test_split
from sklearn.pipeline import Pipeline

from carprices.config import Settings, configure_logging
from carprices.data.load_data import load_data
from carprices.data.validation import check_data_quality
from carprices.exceptions import CarPricesError
from carprices.features.build_features import FeatureConfig, build_preprocessor, feature_names
from carprices.models.evaluate import (
    CrossValidationResult,
    RegressionMetrics,
    cross_validate_model,
    evaluate_model,
)
from carprices.models.persistence import save_model
from carprices.schema import CAR_LISTING_SCHEMA

logger = logging.getLogger(__name__)

LABEL = CAR_LISTING_SCHEMA.label


@dataclass(frozen=True)
class TrainerConfig:
    """
    Options of the training run.

    Attributes
    ----------
    test_fraction : float
        Share of rows held out for the test partition.
    n_folds : int
        Folds used by cross-validation.
    random_state : int
        Seed for the split and the fold assignment.
    alpha : float
        L2 penalty of the Poisson regressor.
    max_iter : int
        LBFGS iteration cap.
    tol : float
        LBFGS stopping tolerance.
    cross_validate : bool
        Run k-fold cross-validation on the full dataset after training.
    """

    test_fraction: float = 0.2
    n_folds: int = 5
    random_state: int = 42
    alpha: float = 1e-4
    max_iter: int = 1000
    tol: float = 1e-7
    cross_validate: bool = True

    def __post_init__(self):
        if not 0.0 < self.test_fraction < 1.0:
            raise ValueError(f"test_fraction must be in (0, 1), got {self.test_fraction}")
        if self.n_folds < 2:
            raise ValueError(f"n_folds must be at least 2, got {self.n_folds}")
        if self.alpha < 0:
            raise ValueError(f"alpha must be >= 0, got {self.alpha}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.tol <= 0:
            raise ValueError(f"tol must be > 0, got {self.tol}")


@dataclass(frozen=True)
class TrainingResult:
    pipeline: Pipeline
    train_metrics: RegressionMetrics
    test_metrics: RegressionMetrics
    cross_validation: Optional[CrossValidationResult] = None

    def to_dict(self) -> dict:
        return {
            "train": self.train_metrics.to_dict(),
            "test": self.test_metrics.to_dict(),
            "cross_validation": self.cross_validation.to_dict() if self.cross_validation else None,
        }


def build_training_pipeline(
    feature_config: FeatureConfig = FeatureConfig(),
    trainer_config: TrainerConfig = TrainerConfig(),
) -> Pipeline:
    """Unfitted feature preprocessor followed by an LBFGS Poisson regressor."""
    regressor = PoissonRegressor(
        alpha=trainer_config.alpha,
        solver="lbfgs",
        max_iter=trainer_config.max_iter,
        tol=trainer_config.tol,
    )
    return Pipeline(steps=[("features", build_preprocessor(feature_config)), ("regressor", regressor)])


def split_data(
    df: pd.DataFrame,
    test_fraction: float = 0.2,
    random_state: int = 42,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    train, test = train_test_split(df, test_size=test_fraction, random_state=random_state)
    return train, test


def train_model(
    df: pd.DataFrame,
    feature_config: FeatureConfig = FeatureConfig(),
    trainer_config: TrainerConfig = TrainerConfig(),
    label: str = LABEL,
) -> TrainingResult:
    """
    Fit the pipeline on a train split and evaluate it.

    The feature transforms are fit once, on the training partition only; the
    test partition is scored with those same fitted parameters. A large gap
    between train and test R² points at overfitting and is only reported.
    """
    df = df[feature_config.input_columns + [label]]

    train, test = split_data(df, trainer_config.test_fraction, trainer_config.random_state)
    logger.info("Split %d rows into %d train / %d test", len(df), len(train), len(test))

    pipeline = build_training_pipeline(feature_config, trainer_config)
    pipeline.fit(train.drop(columns=[label]), train[label])

    train_metrics = evaluate_model(pipeline, train, label)
    test_metrics = evaluate_model(pipeline, test, label)
    logger.info("Train R2=%.4f | Test R2=%.4f", train_metrics.r_squared, test_metrics.r_squared)

    cv = None
    if trainer_config.cross_validate:
        cv = cross_validate_model(
            build_training_pipeline(feature_config, trainer_config),
            df,
            label=label,
            n_folds=trainer_config.n_folds,
            random_state=trainer_config.random_state,
        )

    return TrainingResult(
        pipeline=pipeline,
        train_metrics=train_metrics,
        test_metrics=test_metrics,
        cross_validation=cv,
    )


def parse_args(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> argparse.Namespace:
    settings = settings or Settings.from_env()
    parser = argparse.ArgumentParser(
        description="Train the car price regression model and save it to disk."
    )
    parser.add_argument(
        "data_path",
        nargs="?",
        default=settings.train_data_path,
        help="Path to the training CSV (default: CARPRICES_TRAIN_DATA or data/true_car_listings.csv).",
    )
    parser.add_argument(
        "model_path",
        nargs="?",
        default=settings.model_path,
        help="Where to write the model artifact (default: CARPRICES_MODEL_PATH).",
    )
    parser.add_argument("--separator", default=",", help="Field delimiter of the CSV.")
    parser.add_argument("--no-header", action="store_true", help="The CSV has no header row.")
    parser.add_argument("--test-fraction", type=float, default=TrainerConfig.test_fraction)
    parser.add_argument("--folds", type=int, default=TrainerConfig.n_folds, help="Cross-validation folds.")
    parser.add_argument("--seed", type=int, default=TrainerConfig.random_state)
    parser.add_argument("--alpha", type=float, default=TrainerConfig.alpha, help="L2 penalty.")
    parser.add_argument("--max-iter", type=int, default=TrainerConfig.max_iter)
    parser.add_argument("--no-cv", action="store_true", help="Skip cross-validation.")
    parser.add_argument("--log-level", default=settings.log_level)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        trainer_config = TrainerConfig(
            test_fraction=args.test_fraction,
            n_folds=args.folds,
            random_state=args.seed,
            alpha=args.alpha,
            max_iter=args.max_iter,
            cross_validate=not args.no_cv,
        )
        feature_config = FeatureConfig()

        print("Loading data...")
        df = load_data(args.data_path, separator=args.separator, has_header=not args.no_header)

        quality = check_data_quality(df)
        if not quality.passed:
            logger.warning("Training data failed quality checks: %s", quality.to_dict())

        print("Training model...")
        result = train_model(df, feature_config, trainer_config)
        print(f"Train Set R-Squared: {result.train_metrics.r_squared:.4f} | "
              f"Test Set R-Squared: {result.test_metrics.r_squared:.4f}")
        if result.cross_validation is not None:
            print(f"Cross Validated R-Squared: {result.cross_validation.mean_r_squared:.4f}")

        print("Saving model...")
        metadata = {
            "model_name": "LBFGS Poisson regression (one-hot Make/Model, min-max scaled)",
            "trained_on": pd.Timestamp.today().strftime("%Y-%m-%d"),
            "train_rows": int(len(df)),
            "features": feature_names(result.pipeline.named_steps["features"]),
            "metrics": result.to_dict(),
            "data_quality": quality.to_dict(),
        }
        path = save_model(result.pipeline, CAR_LISTING_SCHEMA, args.model_path, metadata=metadata)
        print(f"Saved model to {path}")
    except (CarPricesError, FileNotFoundError, ValueError) as exc:
        logger.error("Training failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
