"""Monitoring and metrics middleware using Prometheus."""
import logging
import time
from typing import Callable
from flask import request
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from cms_gateway.config.settings import Config

logger = logging.getLogger(__name__)

# Prometheus metrics
cache_events_total = Counter(
    'cms_cache_events_total',
    'Content cache lookups by outcome',
    ['cache', 'event']
)

backend_requests_total = Counter(
    'cms_backend_requests_total',
    'Total number of content backend requests',
    ['provider', 'status']
)

backend_request_duration = Histogram(
    'cms_backend_request_duration_seconds',
    'Time spent waiting for the content backend',
    ['provider'],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0]
)

admin_requests_total = Counter(
    'cms_admin_requests_total',
    'Total number of admin endpoint requests',
    ['method', 'endpoint', 'status']
)


def register_metrics_middleware(app) -> None:
    """
    Register Prometheus metrics endpoint.

    Args:
        app: Flask application instance
    """
    if not app.config.get("ENABLE_METRICS", Config.ENABLE_METRICS):
        return

    @app.route('/metrics')
    def metrics():
        """Prometheus metrics endpoint."""
        return generate_latest(), 200, {'Content-Type': CONTENT_TYPE_LATEST}

    logger.info("Prometheus metrics enabled at /metrics")


def track_admin_request(endpoint: str):
    """
    Decorator to track admin endpoint request metrics.

    Args:
        endpoint: Endpoint name for metrics
    """
    def decorator(f: Callable) -> Callable:
        def wrapper(*args, **kwargs):
            try:
                response = f(*args, **kwargs)
            except Exception:
                admin_requests_total.labels(
                    method=request.method,
                    endpoint=endpoint,
                    status=500
                ).inc()
                raise
            status_code = response[1] if isinstance(response, tuple) else 200
            admin_requests_total.labels(
                method=request.method,
                endpoint=endpoint,
                status=status_code
            ).inc()
            return response

        wrapper.__name__ = f.__name__
        return wrapper
    return decorator


def track_cache_event(cache: str, event: str) -> None:
    """
    Track a cache lookup outcome.

    Args:
        cache: Cache name (usually the provider name)
        event: One of "hit", "miss", "stale", "error"
    """
    try:
        cache_events_total.labels(cache=cache, event=event).inc()
    except Exception as e:
        # Don't fail if metrics tracking fails
        logger.debug(f"Failed to track cache event: {e}")


def track_backend_request(provider: str, status: str, started_at: float) -> None:
    """
    Track a content backend round trip.

    Args:
        provider: Provider name ("strapi", "sanity")
        status: "success" or a CMSErrorCode value
        started_at: ``time.monotonic()`` value taken before the request
    """
    try:
        backend_requests_total.labels(provider=provider, status=status).inc()
        backend_request_duration.labels(provider=provider).observe(time.monotonic() - started_at)
    except Exception as e:
        logger.debug(f"Failed to track backend request metrics: {e}")
