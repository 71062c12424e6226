"""Flask application configuration and blueprint registration."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify

from assessment_translator.config import CONFIG_FILE, load_config
from assessment_translator.logger import get_logger
from assessment_translator.providers.endpoint_cache import PipelineEndpointCache

from .routes.translation import translation_bp
from .routes.settings import settings_bp

logger = get_logger(__name__)


def build_app(config: Optional[Dict[str, Any]] = None, config_file: Optional[Path] = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # Ensure JSON responses keep Unicode data.
    app.json.ensure_ascii = False

    app.config["TRANSLATOR_CONFIG_FILE"] = Path(config_file) if config_file else CONFIG_FILE
    app.config["TRANSLATOR_CONFIG"] = config if config is not None else load_config(app.config["TRANSLATOR_CONFIG_FILE"])
    # One endpoint cache per application session; cleared by POST /api/reset
    app.extensions["endpoint_cache"] = PipelineEndpointCache()

    register_blueprints(app)
    register_default_routes(app)

    return app


def register_blueprints(app: Flask) -> None:
    """Register Flask blueprints."""
    app.register_blueprint(translation_bp, url_prefix="/api")
    app.register_blueprint(settings_bp, url_prefix="/api/settings")


def register_default_routes(app: Flask) -> None:
    """Register default health route and JSON error handlers."""

    @app.get("/health")
    def health_check():
        logger.debug("Health check requested")
        return jsonify({"status": "ok"})

    @app.errorhandler(404)
    def page_not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(500)
    def internal_error(e):
        logger.exception("Internal server error: %s", e)
        return jsonify({"error": "Unexpected error occurred"}), 500
