"""API endpoints module.

Health checks for the orchestrator and cache administration endpoints
called by editors and CMS webhooks.
"""

from cms_gateway.api.cache import cache_blueprint
from cms_gateway.api.health import health_blueprint

__all__ = [
    "cache_blueprint",
    "health_blueprint",
]
