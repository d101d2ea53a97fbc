"""Application factory for the translation catalogue service."""

from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import BadRequest

from tscatalog.backend.config.settings import load_configured_catalog
from tscatalog.backend.version import get_project_version

from .http import REGISTRY_EXTENSION, current_registry, problem_response
from .localization import CatalogRegistry, ResourceError
from .routes import register_routes


def create_app(registry: CatalogRegistry | None = None) -> Flask:
    """Create the Flask application around an explicitly owned registry.

    Without a registry, one is built from the YAML settings. A resource that
    fails to load at start-up raises :class:`ResourceError` here.
    """

    app = Flask(__name__)

    if registry is None:
        registry = CatalogRegistry(load_configured_catalog)
    app.extensions[REGISTRY_EXTENSION] = registry

    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        active = current_registry()
        catalog = active.current
        payload = {
            "status": "ok",
            "version": get_project_version(),
            "locales": list(catalog.locales),
            "default_locale": catalog.default_locale,
            "generation": active.generation,
        }
        return jsonify(payload)

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(ResourceError)
    def handle_resource_error(error: ResourceError):
        return problem_response(
            "invalid_resource", status=422, message=str(error)
        ).to_response()

    return app


__all__ = ["create_app"]
