"""HTTP clients for the content backends."""
from cms_gateway.infrastructure.clients.sanity_api_client import SanityAPIClient
from cms_gateway.infrastructure.clients.strapi_api_client import StrapiAPIClient

__all__ = [
    "SanityAPIClient",
    "StrapiAPIClient",
]
