"""Health check endpoints."""
import logging
from flask import Blueprint, current_app, jsonify

from cms_gateway.domain.errors import CMSError

health_blueprint = Blueprint("health", __name__)
_logger = logging.getLogger(__name__)


@health_blueprint.route("/health", methods=["GET"])
def health_check():
    """
    Basic health check endpoint.

    Returns:
        JSON response with health status
    """
    return jsonify({
        "status": "healthy",
        "service": "cms-gateway"
    }), 200


@health_blueprint.route("/health/ready", methods=["GET"])
def readiness_check():
    """
    Readiness check endpoint (checks the content backend).

    Served from cache when possible, so a backend outage after a
    successful warm-up still reports ready.

    Returns:
        JSON response with readiness status
    """
    container = current_app.config["service_container"]
    provider = container.get_content_provider()
    checks = {"content_backend": False}

    try:
        slugs = provider.get_all_product_slugs()
        checks["content_backend"] = True
        checks["products"] = len(slugs)
    except CMSError as e:
        _logger.error(f"Content backend health check failed: {e.code.value} {e.message}")
        checks["error"] = e.code.value

    ready = checks["content_backend"]
    return jsonify({
        "status": "ready" if ready else "not_ready",
        "provider": getattr(provider, "name", type(provider).__name__),
        "checks": checks
    }), 200 if ready else 503


@health_blueprint.route("/health/live", methods=["GET"])
def liveness_check():
    """
    Liveness check endpoint (for Kubernetes).

    Returns:
        JSON response with liveness status
    """
    return jsonify({
        "status": "alive",
        "service": "cms-gateway"
    }), 200
