"""Service container for dependency injection (IoC Container Pattern)."""
import logging
from threading import Lock
from typing import Optional

from cms_gateway.config.settings import Config
from cms_gateway.domain.interfaces.content_provider import IContentProvider
from cms_gateway.infrastructure.factories.provider_factory import ProviderFactory


class ServiceContainer:
    """
    Service container implementing Dependency Injection pattern.

    Follows Singleton pattern: the whole process shares one content
    provider, and therefore one cache.
    """

    _instance: Optional['ServiceContainer'] = None
    _content_provider: Optional[IContentProvider] = None
    _config: Optional[type[Config]] = None
    _lock = Lock()

    def __new__(cls, config: Optional[type[Config]] = None):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        if config is not None:
            cls._config = config
        return cls._instance

    def __init__(self, config: Optional[type[Config]] = None):
        """Initialize service container."""
        self._logger = logging.getLogger(__name__)

    def get_content_provider(self) -> IContentProvider:
        """Get or create the content provider instance."""
        with self._lock:
            if ServiceContainer._content_provider is None:
                try:
                    ServiceContainer._content_provider = ProviderFactory.create_content_provider(
                        config=self._config
                    )
                except Exception as e:
                    self._logger.error(f"Failed to create ContentProvider: {e}")
                    raise
            return ServiceContainer._content_provider

    @classmethod
    def set_content_provider(cls, provider: IContentProvider) -> None:
        """Install a provider explicitly (tests, custom wiring)."""
        cls._content_provider = provider

    @classmethod
    def reset(cls) -> None:
        """Reset all service instances (useful for testing)."""
        cls._instance = None
        cls._content_provider = None
        cls._config = None
