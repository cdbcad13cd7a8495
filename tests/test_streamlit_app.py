from pathlib import Path

from streamlit.testing.v1 import AppTest

APP_FILE = str(Path(__file__).resolve().parents[1] / "app" / "streamlit_app.py")


def test_dashboard_predicts_price(model_path, monkeypatch):
    monkeypatch.setenv("CARPRICES_MODEL_PATH", model_path)
    at = AppTest.from_file(APP_FILE, default_timeout=60).run()
    assert not at.exception
    assert not at.error

    at.sidebar.selectbox[0].select("Toyota").run()
    assert at.sidebar.selectbox[1].value == "Camry"

    at.button[0].click().run()
    assert not at.exception
    assert not at.error
    assert any("Predicted price for a 2015 Toyota Camry" in c.value for c in at.caption)


def test_dashboard_reports_missing_model(tmp_path, monkeypatch):
    monkeypatch.setenv("CARPRICES_MODEL_PATH", str(tmp_path / "missing.joblib"))
    at = AppTest.from_file(APP_FILE, default_timeout=60).run()
    assert not at.exception
    assert at.error
    assert "Model could not be loaded" in at.error[0].value
