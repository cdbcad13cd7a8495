"""
Car Prices - Prediction Service

Provides `ModelRegistry`, a named collection of loaded pipelines built once at
startup, and `PredictionService`, whose `predict(listing)`:
- Looks up the registered pipeline (never re-reads the artifact).
- Builds a one-row frame in the schema's column order.
- Returns the predicted price as a `PricePrediction`.

Fitted scikit-learn pipelines are only read during `predict`, so concurrent
callers share one loaded model without locking.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Optional

from carprices.config import MODEL_NAME
from carprices.exceptions import ModelNotFoundError
from carprices.models.persistence import LoadedModel, load_model
from carprices.schema import CAR_LISTING_SCHEMA, CarListing, DataSchema, PricePrediction, listings_to_frame

logger = logging.getLogger(__name__)


class ModelRegistry:
    """Named loaded models. Registering an existing name swaps the model in place."""

    def __init__(self):
        self._models: Dict[str, LoadedModel] = {}
        self._lock = threading.Lock()

    def register(self, name: str, model: LoadedModel) -> None:
        with self._lock:
            models = dict(self._models)
            models[name] = model
            # readers see either the old or the new mapping, never a partial one
            self._models = models
        logger.info("Registered model %r", name)

    def load(self, name: str, path, expected_schema: DataSchema = CAR_LISTING_SCHEMA) -> LoadedModel:
        model = load_model(path, expected_schema=expected_schema)
        self.register(name, model)
        return model

    def get(self, name: str) -> LoadedModel:
        try:
            return self._models[name]
        except KeyError:
            raise ModelNotFoundError(f"No model registered under {name!r}") from None

    def names(self) -> List[str]:
        return sorted(self._models)

    def __contains__(self, name) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)


class PredictionService:
    def __init__(self, registry: ModelRegistry, model_name: str = MODEL_NAME):
        self.registry = registry
        self.model_name = model_name

    def predict(self, listing: CarListing, model_name: Optional[str] = None) -> PricePrediction:
        """
        Predict the price of a single listing.

        Returns
        -------
        PricePrediction
            The predicted price; `listing.price` is ignored.
        """
        return self.predict_many([listing], model_name)[0]

    def predict_many(self, listings: Iterable[CarListing], model_name: Optional[str] = None) -> List[PricePrediction]:
        model = self.registry.get(model_name or self.model_name)
        frame = listings_to_frame(listings)
        if frame.empty:
            return []
        scores = model.predict(frame)
        return [PricePrediction(score=float(s)) for s in scores]
