"""Read-only make/model reference list used to fill the form dropdowns."""

from __future__ import annotations

import json
import logging
import os
from typing import List

from pydantic import BaseModel, Field, ValidationError

from carprices.exceptions import ReferenceDataError

logger = logging.getLogger(__name__)


class CarMakeModel(BaseModel):
    make: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)


class CarFileModelService:
    """Loads the reference JSON once at construction; every lookup is served from memory."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        self._entries = self._read(file_path)
        logger.info("Loaded %d make/model pairs from %s", len(self._entries), file_path)

    @staticmethod
    def _read(file_path: str) -> List[CarMakeModel]:
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Car model reference data not found at {file_path}")
        try:
            with open(file_path, encoding="utf-8") as fh:
                raw = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ReferenceDataError(f"{file_path} is not valid JSON: {exc}") from exc
        if not isinstance(raw, list):
            raise ReferenceDataError(f"{file_path} must contain a JSON array of make/model objects")
        try:
            return [CarMakeModel(**item) for item in raw]
        except (TypeError, ValidationError) as exc:
            raise ReferenceDataError(f"{file_path} has an invalid make/model entry: {exc}") from exc

    def get_all(self) -> List[CarMakeModel]:
        return list(self._entries)

    def makes(self) -> List[str]:
        return sorted({e.make for e in self._entries})

    def models_for(self, make: str) -> List[str]:
        return sorted({e.model for e in self._entries if e.make == make})
