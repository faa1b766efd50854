"""Error handling middleware for content backend failures."""
import logging
from flask import jsonify

from cms_gateway.domain.errors import CMSError, CMSErrorCode

logger = logging.getLogger(__name__)

# HTTP status returned to callers for each backend failure kind
STATUS_BY_ERROR_CODE = {
    CMSErrorCode.CONNECTION_ERROR: 503,
    CMSErrorCode.NOT_FOUND: 404,
    CMSErrorCode.UNAUTHORIZED: 502,
    CMSErrorCode.RATE_LIMITED: 503,
    CMSErrorCode.INVALID_RESPONSE: 502,
    CMSErrorCode.UNKNOWN: 502,
}


def init_error_handlers(app) -> None:
    """
    Initialize error handlers for the application.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(CMSError)
    def content_backend_error(error: CMSError):
        """Handle content backend errors that reached a view."""
        status = STATUS_BY_ERROR_CODE.get(error.code, 502)
        logger.error(f"Content backend error ({error.code.value}): {error.message}")
        return jsonify({
            "status": "error",
            "code": error.code.value,
            "message": "Content backend unavailable" if status != 404 else "Resource not found"
        }), status

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({"status": "error", "message": "Resource not found"}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}", exc_info=True)
        return jsonify({"status": "error", "message": "Internal server error"}), 500
