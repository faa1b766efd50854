"""Factory for creating content provider instances (Factory Pattern)."""
import logging
from typing import Optional

from cms_gateway.config.settings import Config, get_config
from cms_gateway.domain.interfaces.content_provider import IContentProvider
from cms_gateway.infrastructure.providers.sanity_provider import SanityContentProvider
from cms_gateway.infrastructure.providers.strapi_provider import StrapiContentProvider


logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "strapi"


class ProviderFactory:
    """
    Factory for creating content provider instances following Factory Pattern.

    Centralizes provider creation and configuration checks so callers only
    ever see IContentProvider.
    """

    @staticmethod
    def create_content_provider(
        provider_type: Optional[str] = None,
        config: Optional[type[Config]] = None
    ) -> IContentProvider:
        """
        Create the content provider selected by configuration.

        Args:
            provider_type: Provider name ("strapi", "sanity"); defaults to CMS_PROVIDER
            config: Configuration class (defaults to get_config())

        Returns:
            IContentProvider instance

        Raises:
            ValueError: If the provider type is unsupported or its required
                settings are missing
        """
        config = config or get_config()
        provider_type = (provider_type or config.CMS_PROVIDER or DEFAULT_PROVIDER).lower()

        if provider_type not in Config.REQUIRED_BY_PROVIDER:
            raise ValueError(f"Unsupported content provider type: {provider_type}")

        missing = config.required_for(provider_type)
        if missing:
            raise ValueError(
                f"Missing {provider_type} configuration. "
                f"Please set {' and '.join(missing)} environment variables."
            )

        if provider_type == "sanity":
            provider = SanityContentProvider(
                project_id=config.SANITY_PROJECT_ID,
                dataset=config.SANITY_DATASET,
                api_token=config.SANITY_API_TOKEN,
                use_cdn=config.SANITY_USE_CDN,
                api_version=config.SANITY_API_VERSION,
                cache_ttl=config.CMS_CACHE_TTL,
                timeout=config.CMS_REQUEST_TIMEOUT
            )
        else:
            provider = StrapiContentProvider(
                base_url=config.STRAPI_URL,
                api_token=config.STRAPI_API_TOKEN,
                cache_ttl=config.CMS_CACHE_TTL,
                timeout=config.CMS_REQUEST_TIMEOUT
            )

        logger.info(f"Content provider created: {provider_type} (cache TTL {config.CMS_CACHE_TTL}s)")
        return provider
