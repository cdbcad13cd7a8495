import json

import pytest

from carprices.config import CAR_MODELS_FILE
from carprices.exceptions import ReferenceDataError
from carprices.web.lookup import CarFileModelService, CarMakeModel


@pytest.fixture
def reference_file(tmp_path):
    path = tmp_path / "carmakerdetails.json"
    path.write_text(json.dumps([
        {"make": "Toyota", "model": "Camry"},
        {"make": "Ford", "model": "Fusion"},
        {"make": "Toyota", "model": "Corolla"},
    ]))
    return str(path)


def test_get_all(reference_file):
    service = CarFileModelService(reference_file)
    entries = service.get_all()
    assert entries[0] == CarMakeModel(make="Toyota", model="Camry")
    assert len(entries) == 3


def test_makes_and_models(reference_file):
    service = CarFileModelService(reference_file)
    assert service.makes() == ["Ford", "Toyota"]
    assert service.models_for("Toyota") == ["Camry", "Corolla"]
    assert service.models_for("Lada") == []


def test_get_all_returns_a_copy(reference_file):
    service = CarFileModelService(reference_file)
    service.get_all().clear()
    assert len(service.get_all()) == 3


def test_packaged_reference_data_loads():
    service = CarFileModelService(CAR_MODELS_FILE)
    assert "Toyota" in service.makes()
    assert "Camry" in service.models_for("Toyota")


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        CarFileModelService(str(tmp_path / "missing.json"))


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps({"make": "Toyota", "model": "Camry"}),
        json.dumps([{"make": "Toyota"}]),
        json.dumps(["Toyota Camry"]),
    ],
)
def test_malformed_file(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content)
    with pytest.raises(ReferenceDataError):
        CarFileModelService(str(path))
