"""Cache administration endpoints (manual clear and CMS webhooks)."""
import hmac
import logging
from datetime import datetime, timezone
from flask import Blueprint, current_app, jsonify, request

from cms_gateway.domain.interfaces.content_provider import ContentType
from cms_gateway.middleware.monitoring import track_admin_request

cache_blueprint = Blueprint("cache", __name__, url_prefix="/api")
_logger = logging.getLogger(__name__)


def _secret_is_valid(secret) -> bool:
    expected = current_app.config.get("REVALIDATE_SECRET")
    if not expected or not isinstance(secret, str):
        return False
    return hmac.compare_digest(secret, expected)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@cache_blueprint.route("/clear-cache", methods=["GET", "POST"])
@track_admin_request("clear_cache")
def clear_cache():
    """
    Clear the content provider cache.

    Query parameters:
        secret: Shared revalidation secret

    Returns:
        JSON response with clear status
    """
    if not _secret_is_valid(request.args.get("secret")):
        _logger.error("[Clear Cache] Invalid secret provided")
        return jsonify({"error": "Invalid secret", "cleared": False}), 401

    provider = current_app.config["service_container"].get_content_provider()
    provider.clear_cache()
    _logger.info("[Clear Cache] Success - content cache cleared")

    return jsonify({
        "cleared": True,
        "message": "CMS cache cleared successfully",
        "timestamp": _timestamp()
    }), 200


@cache_blueprint.route("/revalidate", methods=["POST"])
@track_admin_request("revalidate")
def revalidate():
    """
    CMS webhook: evict cached content of one type.

    Body:
        {"secret": "...", "type": "product" | "article" | "team" | "statistics" | "all"}

    Returns:
        JSON response with the number of evicted entries
    """
    body = request.get_json(silent=True) or {}
    if not _secret_is_valid(body.get("secret")):
        _logger.error("[Revalidate] Invalid secret provided")
        return jsonify({"error": "Invalid secret", "revalidated": False}), 401

    try:
        content_type = ContentType(body.get("type") or ContentType.ALL.value)
    except ValueError:
        return jsonify({
            "error": f"Unknown content type: {body.get('type')}",
            "revalidated": False
        }), 400

    provider = current_app.config["service_container"].get_content_provider()
    evicted = provider.invalidate(content_type)
    _logger.info(f"[Revalidate] Success - evicted {evicted} {content_type.value} entries")

    return jsonify({
        "revalidated": True,
        "type": content_type.value,
        "evicted": evicted,
        "timestamp": _timestamp()
    }), 200
