"""
Load the car listings training data.

This module provides `load_data()` which reads a delimited text file into a
typed DataFrame holding exactly the columns declared by a `DataSchema`, and
`iter_rows()` which reads the same file lazily in chunks and yields
`CarListing` records.

Every declared column is read as text and coerced to its declared type; a value
that cannot be coerced (an empty cell, or a number that is not finite) raises
`DataParseError` naming the column, line and value. There is no partial-row
tolerance.
"""

from __future__ import annotations

import logging
import os
from typing import Iterator, Optional

import numpy as np
import pandas as pd

from carprices.config import TRAIN_DATA_FILE
from carprices.exceptions import DataParseError
from carprices.schema import CAR_LISTING_SCHEMA, NUMERIC, CarListing, DataSchema

logger = logging.getLogger(__name__)

CHUNK_SIZE = 10_000


def _read_csv(path: str, separator: str, has_header: bool, schema: DataSchema, chunksize: Optional[int] = None):
    if not os.path.exists(path):
        raise FileNotFoundError(f"Training data not found at {path}")

    kwargs = dict(
        sep=separator,
        dtype=str,
        keep_default_na=False,
        chunksize=chunksize,
    )
    if has_header:
        kwargs["usecols"] = schema.names
    else:
        kwargs["header"] = None
        kwargs["usecols"] = [c.index for c in schema.columns]

    try:
        return pd.read_csv(path, **kwargs)
    except ValueError as exc:
        # pandas reports missing usecols as a ValueError
        raise DataParseError(f"Could not read {path}: {exc}") from exc


def _coerce(frame: pd.DataFrame, schema: DataSchema, has_header: bool) -> pd.DataFrame:
    """
    Rename positional columns, order them as in the schema and coerce dtypes.

    Raises
    ------
    DataParseError
        On the first value that cannot be coerced to its declared type.
    """
    if not has_header:
        frame = frame.rename(columns={c.index: c.name for c in schema.columns})
    frame = frame[schema.names].copy()

    # 1-based line numbers in the source file
    line_offset = 2 if has_header else 1

    for col in schema.columns:
        raw = frame[col.name]
        if col.dtype == NUMERIC:
            coerced = pd.to_numeric(raw.str.strip(), errors="coerce")
            bad = coerced.isna() | ~np.isfinite(coerced)
            reason = "is not a finite number"
        else:
            coerced = raw
            bad = raw.str.strip() == ""
            reason = "is empty"
        if bad.any():
            idx = bad.idxmax()
            value = raw.loc[idx]
            line = int(idx) + line_offset
            raise DataParseError(
                f"Cannot parse column {col.name!r} at line {line}: {value!r} {reason}",
                column=col.name,
                line=line,
                value=value,
            )
        if col.dtype == NUMERIC:
            frame[col.name] = coerced.astype("float64")

    return frame


def load_data(
    path: str = TRAIN_DATA_FILE,
    separator: str = ",",
    has_header: bool = True,
    schema: DataSchema = CAR_LISTING_SCHEMA,
) -> pd.DataFrame:
    """
    Load the training data into a typed DataFrame.

    Parameters
    ----------
    path : str
        Path to the delimited text file.
    separator : str
        Field delimiter.
    has_header : bool
        If True, columns are selected by name from the header row; otherwise by
        the schema's positional indices.
    schema : DataSchema
        Columns to read and their declared types.

    Returns
    -------
    pd.DataFrame
        One row per listing, columns in schema order.
    """
    raw = _read_csv(path, separator, has_header, schema)
    frame = _coerce(raw, schema, has_header)
    logger.info("Loaded %d rows from %s", len(frame), path)
    return frame


def iter_rows(
    path: str = TRAIN_DATA_FILE,
    separator: str = ",",
    has_header: bool = True,
    schema: DataSchema = CAR_LISTING_SCHEMA,
    chunksize: int = CHUNK_SIZE,
) -> Iterator[CarListing]:
    """Lazily yield `CarListing` records, reading the file `chunksize` rows at a time."""
    reader = _read_csv(path, separator, has_header, schema, chunksize=chunksize)
    with reader:
        for chunk in reader:
            chunk = _coerce(chunk, schema, has_header)
            for row in chunk.itertuples(index=False):
                record = dict(zip(schema.names, row))
                yield CarListing(
                    year=record["Year"],
                    mileage=record["Mileage"],
                    make=record["Make"],
                    model=record["Model"],
                    price=record.get(schema.label),
                )
