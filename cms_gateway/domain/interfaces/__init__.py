"""Domain interfaces following Dependency Inversion Principle."""

from cms_gateway.domain.interfaces.content_provider import ContentType, IContentProvider

__all__ = [
    "ContentType",
    "IContentProvider",
]
