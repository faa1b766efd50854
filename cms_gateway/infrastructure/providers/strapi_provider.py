"""Strapi content provider implementation (Strategy Pattern)."""
import logging
from typing import List, Optional

from cms_gateway.domain.entities.article import Article, ArticleListItem
from cms_gateway.domain.entities.export_statistics import ExportStatistics
from cms_gateway.domain.entities.product import Product
from cms_gateway.domain.entities.team_member import TeamMember
from cms_gateway.domain.errors import CMSError, CMSErrorCode
from cms_gateway.domain.interfaces.content_provider import (
    ContentType,
    IContentProvider,
    LocaleLike,
    parse_limit,
)
from cms_gateway.domain.value_objects.locale import Locale
from cms_gateway.infrastructure.cache import TTLCache, keys
from cms_gateway.infrastructure.clients.error_mapping import invalid_response_guard
from cms_gateway.infrastructure.clients.strapi_api_client import StrapiAPIClient
from cms_gateway.infrastructure.transformers.images import StrapiImageBuilder
from cms_gateway.infrastructure.transformers.localization import UnknownCategoryError
from cms_gateway.infrastructure.transformers.strapi_transformer import StrapiTransformer


class StrapiContentProvider(IContentProvider):
    """
    Strapi REST content provider.

    Implements IContentProvider by composing a StrapiAPIClient, a
    StrapiTransformer and its own TTLCache.
    """

    name = "strapi"

    def __init__(
        self,
        base_url: str,
        api_token: str,
        cache_ttl: Optional[int] = None,
        timeout: int = 30,
        client: Optional[StrapiAPIClient] = None,
        cache: Optional[TTLCache] = None
    ):
        """
        Initialize the Strapi provider.

        Args:
            base_url: Strapi server URL
            api_token: API token for authentication
            cache_ttl: Cache TTL in seconds (defaults to 1 hour)
            timeout: Request timeout in seconds
            client: Optional API client (Dependency Injection)
            cache: Optional cache instance (Dependency Injection)
        """
        self._logger = logging.getLogger(__name__)
        self._client = client if client is not None else StrapiAPIClient(base_url, api_token, timeout=timeout)
        self._transformer = StrapiTransformer(StrapiImageBuilder(base_url))
        self._cache = cache if cache is not None else TTLCache(cache_ttl, name=self.name)

    # Products

    def get_products(self, locale: LocaleLike) -> List[Product]:
        Locale.parse(locale)
        return self._cache.get_or_fetch(keys.PRODUCTS, self._fetch_products)

    def _fetch_products(self) -> List[Product]:
        items = self._client.get_collection("/products", {"populate": "*"})
        products = []
        with invalid_response_guard("Strapi", "product"):
            for item in items:
                try:
                    products.append(self._transformer.product(item))
                except UnknownCategoryError as e:
                    self._logger.warning(f"Skipping product {item.get('id')}: {e}")
        return products

    def get_product_by_slug(self, slug: str, locale: LocaleLike) -> Optional[Product]:
        Locale.parse(locale)
        return self._cache.get_or_fetch(keys.product(slug), lambda: self._fetch_product(slug))

    def _fetch_product(self, slug: str) -> Optional[Product]:
        items = self._find_by_slug("/products", slug)
        if not items:
            return None
        with invalid_response_guard("Strapi", "product"):
            return self._transformer.product(items[0])

    def get_all_product_slugs(self) -> List[str]:
        return self._cache.get_or_fetch(keys.PRODUCT_SLUGS, lambda: self._fetch_slugs("/products"))

    # Articles

    def get_articles(self, locale: LocaleLike, limit: Optional[int] = None) -> List[ArticleListItem]:
        Locale.parse(locale)
        limit = parse_limit(limit)
        return self._cache.get_or_fetch(keys.articles(limit), lambda: self._fetch_articles(limit))

    def _fetch_articles(self, limit: Optional[int]) -> List[ArticleListItem]:
        items = self._client.get_collection(
            "/articles",
            {"populate": "*", "sort": "published_at:desc"},
            limit=limit
        )
        with invalid_response_guard("Strapi", "article"):
            articles = [self._transformer.article_list_item(item) for item in items]
        articles.sort(key=lambda article: article.published_at, reverse=True)
        return articles[:limit] if limit else articles

    def get_article_by_slug(self, slug: str, locale: LocaleLike) -> Optional[Article]:
        Locale.parse(locale)
        return self._cache.get_or_fetch(keys.article(slug), lambda: self._fetch_article(slug))

    def _fetch_article(self, slug: str) -> Optional[Article]:
        items = self._find_by_slug("/articles", slug)
        if not items:
            return None
        with invalid_response_guard("Strapi", "article"):
            return self._transformer.article(items[0])

    def get_all_article_slugs(self) -> List[str]:
        return self._cache.get_or_fetch(keys.ARTICLE_SLUGS, lambda: self._fetch_slugs("/articles"))

    # Team members

    def get_team_members(self, locale: LocaleLike) -> List[TeamMember]:
        Locale.parse(locale)
        return self._cache.get_or_fetch(keys.TEAM_MEMBERS, self._fetch_team_members)

    def _fetch_team_members(self) -> List[TeamMember]:
        items = self._client.get_collection("/team-members", {"populate": "*", "sort": "order:asc"})
        with invalid_response_guard("Strapi", "team member"):
            members = [self._transformer.team_member(item) for item in items]
        return sorted(members, key=lambda member: member.order)

    # Export statistics

    def get_export_statistics(self) -> Optional[ExportStatistics]:
        return self._cache.get_or_fetch(keys.EXPORT_STATISTICS, self._fetch_export_statistics)

    def _fetch_export_statistics(self) -> Optional[ExportStatistics]:
        item = self._client.get_single("/export-statistic", {"populate": "*"})
        if not item:
            return None
        with invalid_response_guard("Strapi", "export statistics"):
            return self._transformer.export_statistics(item)

    # Cache management

    def clear_cache(self) -> None:
        self._cache.clear()

    def invalidate(self, content_type: ContentType) -> int:
        if ContentType(content_type) is ContentType.ALL:
            count = len(self._cache)
            self._cache.clear()
            return count
        return sum(self._cache.invalidate_prefix(prefix) for prefix in keys.prefixes_for(content_type))

    # Helpers

    def _find_by_slug(self, endpoint: str, slug: str) -> list:
        try:
            return self._client.get_collection(
                endpoint,
                {"filters[slug][$eq]": slug, "populate": "*"},
                limit=1
            )
        except CMSError as e:
            if e.code is CMSErrorCode.NOT_FOUND:
                return []
            raise

    def _fetch_slugs(self, endpoint: str) -> List[str]:
        items = self._client.get_collection(endpoint, {"fields[0]": "slug"})
        with invalid_response_guard("Strapi", "slug"):
            return self._transformer.slugs(items)
