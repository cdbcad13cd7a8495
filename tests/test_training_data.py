"""Sanity checks of the real training file, run when CARPRICES_TRAIN_DATA points at it."""
import datetime
import os

import pytest

from carprices.data.load_data import load_data
from carprices.data.validation import MIN_ROWS, MIN_YEAR

TRAIN_DATA = os.environ.get("CARPRICES_TRAIN_DATA")

pytestmark = pytest.mark.skipif(
    not TRAIN_DATA or not os.path.exists(TRAIN_DATA),
    reason="CARPRICES_TRAIN_DATA is not set to an existing training file",
)


@pytest.fixture(scope="module")
def rows():
    return load_data(TRAIN_DATA)


def test_valid_price(rows):
    assert not (rows["Price"] < 0).any()


def test_valid_year(rows):
    max_year = datetime.date.today().year + 1
    assert ((rows["Year"] > MIN_YEAR) & (rows["Year"] <= max_year)).all()


def test_valid_mileage(rows):
    assert not (rows["Mileage"] < 0).any()


def test_minimum_number_of_rows(rows):
    assert len(rows) > MIN_ROWS
