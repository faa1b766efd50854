"""Domain layer: value objects, entities, interfaces and errors."""
from cms_gateway.domain.errors import CMSError, CMSErrorCode

__all__ = ["CMSError", "CMSErrorCode"]
