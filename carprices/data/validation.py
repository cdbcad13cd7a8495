"""
Data quality checks for the training set.

The rules are not enforced by the pipeline; the training job only logs a
warning when they fail, and the data test suite asserts them on the real file.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Dict, Optional

import pandas as pd

MIN_YEAR = 1950
MIN_ROWS = 10_000


@dataclass(frozen=True)
class DataQualityReport:
    row_count: int
    negative_prices: int
    negative_mileages: int
    implausible_years: int
    min_rows: int
    max_year: int

    @property
    def enough_rows(self) -> bool:
        return self.row_count > self.min_rows

    @property
    def passed(self) -> bool:
        return (
            self.enough_rows
            and self.negative_prices == 0
            and self.negative_mileages == 0
            and self.implausible_years == 0
        )

    def to_dict(self) -> Dict:
        return {
            "row_count": self.row_count,
            "negative_prices": self.negative_prices,
            "negative_mileages": self.negative_mileages,
            "implausible_years": self.implausible_years,
            "min_rows": self.min_rows,
            "max_year": self.max_year,
            "passed": self.passed,
        }


def check_data_quality(
    df: pd.DataFrame,
    current_year: Optional[int] = None,
    min_rows: int = MIN_ROWS,
) -> DataQualityReport:
    """
    Count rows violating the dataset invariants.

    A valid row has Price >= 0, Mileage >= 0 and MIN_YEAR < Year <= current_year + 1.
    The dataset additionally needs more than `min_rows` rows.
    """
    if current_year is None:
        current_year = datetime.date.today().year
    max_year = current_year + 1

    year = df["Year"]
    return DataQualityReport(
        row_count=int(len(df)),
        negative_prices=int((df["Price"] < 0).sum()),
        negative_mileages=int((df["Mileage"] < 0).sum()),
        implausible_years=int(((year <= MIN_YEAR) | (year > max_year)).sum()),
        min_rows=min_rows,
        max_year=max_year,
    )
