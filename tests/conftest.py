import numpy as np
import pandas as pd
import pytest

from carprices.models.persistence import save_model
from carprices.models.predict import ModelRegistry, PredictionService
from carprices.models.train import TrainerConfig, train_model
from carprices.schema import CAR_LISTING_SCHEMA

# base price and models per make
MAKES = {
    "Toyota": (20000, ["Camry", "Corolla", "RAV4"]),
    "Ford": (16000, ["Fusion", "Escape"]),
    "BMW": (38000, ["3", "5"]),
    "Honda": (19000, ["Civic", "Accord"]),
}

CSV_COLUMNS = ["Price", "Year", "Mileage", "City", "State", "Vin", "Make", "Model"]


def make_listings(n=600, seed=0):
    """Synthetic listings whose price depends on make, age and mileage, with noise."""
    rng = np.random.default_rng(seed)
    makes = list(MAKES)
    rows = []
    for _ in range(n):
        make = makes[rng.integers(len(makes))]
        base, models = MAKES[make]
        model = models[rng.integers(len(models))]
        year = float(rng.integers(2005, 2019))
        mileage = float(rng.integers(1000, 150000))
        price = base * np.exp(0.08 * (year - 2012) - mileage / 150000) * rng.lognormal(0.0, 0.1)
        rows.append((round(float(price), 2), year, mileage, make, model))
    return pd.DataFrame(rows, columns=["Price", "Year", "Mileage", "Make", "Model"])


def write_listings_csv(df, path, header=True, sep=","):
    out = df.copy()
    out["City"] = "Austin"
    out["State"] = "TX"
    out["Vin"] = [f"VIN{i:08d}" for i in range(len(out))]
    out = out[CSV_COLUMNS]
    out.to_csv(path, index=False, header=header, sep=sep)
    return path


@pytest.fixture
def listings_df():
    return make_listings()


@pytest.fixture
def listings_csv(tmp_path, listings_df):
    return str(write_listings_csv(listings_df, tmp_path / "true_car_listings.csv"))


@pytest.fixture(scope="session")
def training_result():
    return train_model(make_listings(), trainer_config=TrainerConfig(cross_validate=False))


@pytest.fixture(scope="session")
def model_path(tmp_path_factory, training_result):
    path = tmp_path_factory.mktemp("models") / "true_car_listings-model.joblib"
    save_model(training_result.pipeline, CAR_LISTING_SCHEMA, path, metadata={"model_name": "test"})
    return str(path)


@pytest.fixture
def registry(model_path):
    reg = ModelRegistry()
    reg.load("PricePrediction", model_path)
    return reg


@pytest.fixture
def service(registry):
    return PredictionService(registry)
