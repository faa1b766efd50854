"""Flask application factory for the content gateway admin surface."""
import logging
import sys
from typing import Optional
from flask import Flask, jsonify

from cms_gateway.config.settings import Config, get_config
from cms_gateway.domain.interfaces.content_provider import IContentProvider
from cms_gateway.infrastructure.service_container import ServiceContainer
from cms_gateway.middleware.error_handler import init_error_handlers
from cms_gateway.middleware.monitoring import register_metrics_middleware
from cms_gateway.api import cache_blueprint, health_blueprint


def create_app(
    config_class: Optional[type[Config]] = None,
    content_provider: Optional[IContentProvider] = None
) -> Flask:
    """
    Create and configure Flask application with dependency injection.

    The content provider is built eagerly: a missing backend setting stops
    the process here instead of failing on the first page render.

    Args:
        config_class: Optional configuration class (for testing)
        content_provider: Optional provider to install instead of the
            configured one (for testing)

    Returns:
        Configured Flask application

    Raises:
        ValueError: If the selected provider's configuration is incomplete
    """
    _logger = logging.getLogger(__name__)

    app = Flask(__name__)

    config = config_class or get_config()
    app.config.from_object(config)

    _configure_logging(config)

    app.register_blueprint(health_blueprint)
    app.register_blueprint(cache_blueprint)

    @app.route("/", methods=["GET"])
    def root():
        """Root endpoint for testing."""
        return jsonify({
            "status": "ok",
            "service": "cms-gateway",
            "message": "Service is running"
        }), 200

    register_metrics_middleware(app)
    init_error_handlers(app)

    container = ServiceContainer(config)
    if content_provider is not None:
        container.set_content_provider(content_provider)
    try:
        container.get_content_provider()
    except Exception as e:
        _logger.critical(f"Content provider initialization failed: {e}", exc_info=True)
        raise
    app.config['service_container'] = container

    _logger.info(f"App routes registered: {[str(rule) for rule in app.url_map.iter_rules()]}")
    return app


def _configure_logging(config: type[Config]) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=logging.DEBUG if config.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True
    )
