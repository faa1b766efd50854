"""Infrastructure providers - concrete implementations."""

from cms_gateway.infrastructure.providers.sanity_provider import SanityContentProvider
from cms_gateway.infrastructure.providers.strapi_provider import StrapiContentProvider

__all__ = [
    "SanityContentProvider",
    "StrapiContentProvider",
]
