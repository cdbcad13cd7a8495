"""
Central configuration for the project.

This module centralizes environment-independent constants and derived paths
used throughout the codebase (training data, model artifact and reference data
paths), the `Settings` object read from environment variables at startup, and
logging setup for the entry points.

Constants
---------
BASE_DIR : str
    Absolute path to the project root (parent of the `carprices` package).
DATA_DIR, MODELS_DIR : str
    Paths to the data and model folders.
TRAIN_DATA_FILE : str
    Default training CSV (`true_car_listings.csv`).
MODEL_FILE : str
    Default path of the persisted pipeline artifact.
CAR_MODELS_FILE : str
    Packaged make/model reference list used by the front ends.
MODEL_NAME : str
    Name the price model is registered under in the model registry.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from carprices.exceptions import ConfigError

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
BASE_DIR = os.path.dirname(PACKAGE_DIR)
DATA_DIR = os.path.join(BASE_DIR, "data")
MODELS_DIR = os.path.join(BASE_DIR, "models")

TRAIN_DATA_FILE = os.path.join(DATA_DIR, "true_car_listings.csv")
MODEL_FILE = os.path.join(MODELS_DIR, "true_car_listings-model.joblib")
CAR_MODELS_FILE = os.path.join(PACKAGE_DIR, "web", "static", "data", "carmakerdetails.json")

MODEL_NAME = "PricePrediction"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "y", "on")


@dataclass(frozen=True)
class Settings:
    """Runtime settings; paths are always supplied from outside the code."""

    train_data_path: str = TRAIN_DATA_FILE
    model_path: str = MODEL_FILE
    car_models_path: str = CAR_MODELS_FILE
    model_name: str = MODEL_NAME
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    debug: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.model_name:
            raise ConfigError("model_name must not be empty")
        if not 0 < self.port < 65536:
            raise ConfigError(f"port must be between 1 and 65535, got {self.port}")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(f"Unknown log level {self.log_level!r}; expected one of {', '.join(_LOG_LEVELS)}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from `CARPRICES_*` environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        port_raw = env.get("CARPRICES_PORT", str(DEFAULT_PORT))
        try:
            port = int(port_raw)
        except ValueError as exc:
            raise ConfigError(f"CARPRICES_PORT must be an integer, got {port_raw!r}") from exc

        return cls(
            train_data_path=env.get("CARPRICES_TRAIN_DATA", TRAIN_DATA_FILE),
            model_path=env.get("CARPRICES_MODEL_PATH", MODEL_FILE),
            car_models_path=env.get("CARPRICES_CAR_MODELS", CAR_MODELS_FILE),
            model_name=env.get("CARPRICES_MODEL_NAME", MODEL_NAME),
            host=env.get("CARPRICES_HOST", DEFAULT_HOST),
            port=port,
            debug=_env_flag(env.get("CARPRICES_DEBUG", "false")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    def to_dict(self) -> dict:
        return {
            "train_data_path": self.train_data_path,
            "model_path": self.model_path,
            "car_models_path": self.car_models_path,
            "model_name": self.model_name,
            "server": {"host": self.host, "port": self.port, "debug": self.debug},
            "log_level": self.log_level,
        }


def configure_logging(level: str = "INFO") -> None:
    """Install the root log handler used by the command line entry points."""
    level = level.upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"Unknown log level {level!r}")
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT)
