import pytest

from carprices.config import MODEL_FILE, MODEL_NAME, TRAIN_DATA_FILE, Settings, configure_logging
from carprices.exceptions import ConfigError


def test_defaults_without_environment():
    settings = Settings.from_env({})
    assert settings.train_data_path == TRAIN_DATA_FILE
    assert settings.model_path == MODEL_FILE
    assert settings.model_name == MODEL_NAME == "PricePrediction"
    assert settings.port == 5000
    assert settings.debug is False


def test_environment_overrides():
    settings = Settings.from_env({
        "CARPRICES_TRAIN_DATA": "/data/listings.csv",
        "CARPRICES_MODEL_PATH": "/models/model.joblib",
        "CARPRICES_MODEL_NAME": "Canary",
        "CARPRICES_PORT": "8080",
        "CARPRICES_DEBUG": "true",
        "LOG_LEVEL": "debug",
    })
    assert settings.train_data_path == "/data/listings.csv"
    assert settings.model_path == "/models/model.joblib"
    assert settings.model_name == "Canary"
    assert settings.port == 8080
    assert settings.debug is True
    assert settings.log_level == "DEBUG"
    assert settings.to_dict()["server"]["port"] == 8080


@pytest.mark.parametrize(
    "env",
    [
        {"CARPRICES_PORT": "eighty"},
        {"CARPRICES_PORT": "70000"},
        {"LOG_LEVEL": "chatty"},
        {"CARPRICES_MODEL_NAME": ""},
    ],
)
def test_invalid_settings(env):
    with pytest.raises(ConfigError):
        Settings.from_env(env)


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        configure_logging("chatty")


def test_configure_logging_accepts_lowercase():
    configure_logging("warning")
