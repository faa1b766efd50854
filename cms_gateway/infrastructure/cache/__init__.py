"""Provider-owned caching."""
from cms_gateway.infrastructure.cache.ttl_cache import DEFAULT_TTL_SECONDS, TTLCache

__all__ = ["DEFAULT_TTL_SECONDS", "TTLCache"]
