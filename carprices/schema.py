"""
Record types and the training data schema.

`CAR_LISTING_SCHEMA` describes the columns read from `true_car_listings.csv`
(Price, Year, Mileage, City, State, Vin, Make, Model); only the five columns the
model uses are declared. `CarListing` and `PricePrediction` are the input and
output records of the prediction service.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd
from pydantic import BaseModel, Field, field_validator

NUMERIC = "float"
TEXT = "str"
_DTYPES = (NUMERIC, TEXT)


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    dtype: str
    index: int

    def __post_init__(self):
        if self.dtype not in _DTYPES:
            raise ValueError(f"Unsupported dtype {self.dtype!r} for column {self.name!r}")
        if self.index < 0:
            raise ValueError(f"Column index must be >= 0, got {self.index} for {self.name!r}")


@dataclass(frozen=True)
class DataSchema:
    """Ordered column declarations plus the name of the label column."""

    columns: Tuple[ColumnSpec, ...]
    label: str

    def __post_init__(self):
        names = [c.name for c in self.columns]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate column names in schema: {names}")
        if self.label not in names:
            raise ValueError(f"Label column {self.label!r} is not declared in the schema")

    @property
    def names(self) -> List[str]:
        return [c.name for c in self.columns]

    @property
    def feature_names(self) -> List[str]:
        return [c.name for c in self.columns if c.name != self.label]

    def signature(self) -> List[Tuple[str, str]]:
        """(name, dtype) pairs; two schemas are compatible when their signatures match."""
        return [(c.name, c.dtype) for c in self.columns]

    def to_dict(self) -> Dict:
        return {
            "label": self.label,
            "columns": [{"name": c.name, "dtype": c.dtype, "index": c.index} for c in self.columns],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "DataSchema":
        columns = tuple(ColumnSpec(name=c["name"], dtype=c["dtype"], index=int(c["index"])) for c in data["columns"])
        return cls(columns=columns, label=data["label"])


CAR_LISTING_SCHEMA = DataSchema(
    columns=(
        ColumnSpec("Price", NUMERIC, 0),
        ColumnSpec("Year", NUMERIC, 1),
        ColumnSpec("Mileage", NUMERIC, 2),
        ColumnSpec("Make", TEXT, 6),
        ColumnSpec("Model", TEXT, 7),
    ),
    label="Price",
)


class CarListing(BaseModel):
    """One car listing; `price` is only set for training rows."""

    year: float
    mileage: float
    make: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    price: Optional[float] = None

    @field_validator("year", "mileage", "price")
    @classmethod
    def _finite(cls, v):
        if v is not None and not math.isfinite(v):
            raise ValueError("must be a finite number")
        return v

    @field_validator("make", "model")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    def to_record(self) -> Dict:
        return {
            "Year": self.year,
            "Mileage": self.mileage,
            "Make": self.make,
            "Model": self.model,
            "Price": self.price,
        }


class PricePrediction(BaseModel):
    score: float


def listings_to_frame(listings: Iterable[CarListing], include_label: bool = False) -> pd.DataFrame:
    """Convert listings to a DataFrame with the schema's column names."""
    columns = CAR_LISTING_SCHEMA.feature_names
    if include_label:
        columns = columns + [CAR_LISTING_SCHEMA.label]
    rows = [listing.to_record() for listing in listings]
    return pd.DataFrame(rows, columns=columns)
