"""Flask application configuration and blueprint registration."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Flask, jsonify

from localizer import __version__
from localizer.config import resolve_paths
from localizer.exceptions import LocalizerError
from localizer.logger import get_logger

from .routes import (
    diagnostics_bp,
    extraction_bp,
    jobs_bp,
    keys_bp,
    normalize_bp,
    sync_bp,
)

logger = get_logger(__name__)


def build_app(config: Optional[Dict[str, Any]] = None, project_root=None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # Ensure JSON responses keep Unicode data.
    app.config["JSON_AS_ASCII"] = False
    app.json.ensure_ascii = False

    config = dict(config or {})
    app.config["LOCALIZER_CONFIG"] = config
    app.config["LOCALIZER_PROJECT_ROOT"] = project_root
    app.config["LOCALIZER_PATHS"] = resolve_paths(config, project_root)

    register_blueprints(app)
    register_default_routes(app)

    return app


def register_blueprints(app: Flask) -> None:
    """Register Flask blueprints."""
    app.register_blueprint(extraction_bp, url_prefix="/api")
    app.register_blueprint(keys_bp, url_prefix="/api/keys")
    app.register_blueprint(sync_bp, url_prefix="/api/sync")
    app.register_blueprint(jobs_bp, url_prefix="/api/jobs")
    app.register_blueprint(normalize_bp, url_prefix="/api/normalize")
    app.register_blueprint(diagnostics_bp, url_prefix="/api/diagnostics")


def register_default_routes(app: Flask) -> None:
    """Register health route and JSON error handlers."""

    @app.get("/health")
    def health_check():
        logger.debug("Health check requested")
        return jsonify({"status": "ok", "version": __version__})

    @app.errorhandler(LocalizerError)
    def localizer_error(e: LocalizerError):
        logger.warning("Request failed: %s", e)
        return jsonify({"error": str(e), "code": e.code, "details": e.details}), 400

    @app.errorhandler(404)
    def page_not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_error(e):
        """Handle 500 errors with a JSON body."""
        logger.exception("Internal server error: %s", e)
        return jsonify({"error": "Internal server error"}), 500
