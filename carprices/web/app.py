"""
Flask web app serving car price predictions.

GET / renders the listing form, POST / renders the same page with the predicted
price. Bad input and an unavailable model (a missing or unreadable artifact)
produce a rendered error page rather than a crashed worker.

Run locally:
    carprices-web
or with any WSGI server:
    gunicorn "carprices.web.app:create_app_from_settings()"
"""

from __future__ import annotations

import logging
import sys
from typing import Dict, List, Optional

from flask import Flask, jsonify, render_template, request
from pydantic import ValidationError

from carprices.config import Settings, configure_logging
from carprices.exceptions import ArtifactFormatError, ModelNotFoundError
from carprices.models.predict import ModelRegistry, PredictionService
from carprices.schema import CarListing
from carprices.web.lookup import CarFileModelService

logger = logging.getLogger(__name__)

FORM_FIELDS = ("year", "mileage", "make", "model")


def _validation_messages(exc: ValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "input"
        messages.append(f"{field.capitalize()}: {err.get('msg', 'invalid value')}")
    return messages


def create_app(
    prediction_service: PredictionService,
    car_model_service: CarFileModelService,
    config: Optional[Dict] = None,
) -> Flask:
    """
    Build the Flask application around already constructed services.

    Parameters
    ----------
    prediction_service : PredictionService
        Used for every POST; holds the loaded model registry.
    car_model_service : CarFileModelService
        Supplies the make/model dropdown values.
    config : dict, optional
        Extra Flask config values (e.g. {"TESTING": True}).
    """
    app = Flask(__name__)
    if config:
        app.config.update(config)

    def render_form(form: Dict[str, str], prediction=None):
        return render_template(
            "index.html",
            form=form,
            makes=car_model_service.makes(),
            reference=[e.model_dump() for e in car_model_service.get_all()],
            prediction=prediction,
        )

    def render_error(title: str, messages: List[str], status: int):
        return render_template("error.html", title=title, messages=messages, status=status), status

    @app.get("/")
    def index():
        return render_form({})

    @app.post("/")
    def predict():
        form = {name: request.form.get(name, "").strip() for name in FORM_FIELDS}
        try:
            listing = CarListing(**form)
        except ValidationError as exc:
            return render_error("Invalid input", _validation_messages(exc), 400)

        try:
            prediction = prediction_service.predict(listing)
        except ModelNotFoundError as exc:
            logger.error("Prediction requested but model is unavailable: %s", exc)
            return render_error("Model unavailable", [str(exc)], 503)

        logger.info("Predicted %.2f for %s %s %d", prediction.score, listing.make, listing.model, int(listing.year))
        return render_form(form, prediction=prediction)

    @app.get("/api/car-models")
    def car_models():
        return jsonify([e.model_dump() for e in car_model_service.get_all()])

    @app.get("/health")
    def health():
        return jsonify({"status": "ok", "models": prediction_service.registry.names()})

    @app.errorhandler(404)
    def not_found(exc):
        return render_error("Page not found", [f"No page at {request.path}"], 404)

    @app.errorhandler(405)
    def method_not_allowed(exc):
        return render_error("Method not allowed", [f"{request.method} is not supported for {request.path}"], 405)

    @app.errorhandler(500)
    def internal_error(exc):
        logger.error("Unhandled error while serving %s: %r",
                     request.path, getattr(exc, "original_exception", exc))
        return render_error("Something went wrong", ["The prediction could not be completed."], 500)

    return app


def create_app_from_settings(settings: Optional[Settings] = None) -> Flask:
    """Compose registry, services and app once at startup."""
    settings = settings or Settings.from_env()
    logger.info("Starting web app with settings %s", settings.to_dict())

    registry = ModelRegistry()
    try:
        registry.load(settings.model_name, settings.model_path)
    except (FileNotFoundError, ArtifactFormatError) as exc:
        # the app still starts; predictions render the "model unavailable" page
        logger.error("%s", exc)

    prediction_service = PredictionService(registry, model_name=settings.model_name)
    car_model_service = CarFileModelService(settings.car_models_path)
    return create_app(prediction_service, car_model_service, config={"DEBUG": settings.debug})


def main() -> int:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    app = create_app_from_settings(settings)
    app.run(host=settings.host, port=settings.port, debug=settings.debug)
    return 0


if __name__ == "__main__":
    sys.exit(main())
