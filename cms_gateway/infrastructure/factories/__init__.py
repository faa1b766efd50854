"""Factories for creating provider instances (Factory Pattern)."""

from cms_gateway.infrastructure.factories.provider_factory import ProviderFactory

__all__ = [
    "ProviderFactory",
]
