"""Sanity content provider implementation (Strategy Pattern)."""
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
from cms_gateway.infrastructure.clients.sanity_api_client import SanityAPIClient
from cms_gateway.infrastructure.transformers.images import SanityImageBuilder
from cms_gateway.infrastructure.transformers.localization import UnknownCategoryError
from cms_gateway.infrastructure.transformers.sanity_transformer import SanityTransformer

PRODUCT_PROJECTION = """{
  _id, name, slug, description, category, isFlagship, image, gallery, origin,
  technicalSpecs, packaging, certifications, moq, availability, incoterms,
  order, _createdAt, _updatedAt
}"""

ARTICLE_LIST_PROJECTION = """{
  _id, title, slug, category, excerpt, image, publishedAt, featured,
  _createdAt, _updatedAt
}"""

# Tagged authors embed a team member reference; legacy authors are the reference itself
ARTICLE_PROJECTION = """{
  _id, title, slug, category, excerpt, content, image, publishedAt,
  "author": select(
    defined(author.authorType) => author{
      authorType,
      teamMember->{_id, name, photo},
      externalName,
      externalLink
    },
    author->{_id, name, photo}
  ),
  relatedProducts[]->{slug},
  featured, _createdAt, _updatedAt
}"""

TEAM_MEMBER_PROJECTION = """{
  _id, name, role, department, bio, photo, email, phone, linkedin,
  isKeyContact, order
}"""

EXPORT_STATISTICS_PROJECTION = """{
  lastUpdated, kpi, exportsByRegion, topDestinations, monthlyVolumes, productMix
}"""


class SanityContentProvider(IContentProvider):
    """
    Sanity content provider.

    Implements IContentProvider by composing a SanityAPIClient, a
    SanityTransformer and its own TTLCache.
    """

    name = "sanity"

    def __init__(
        self,
        project_id: str,
        dataset: str,
        api_token: Optional[str] = None,
        use_cdn: bool = True,
        api_version: str = "2024-01-01",
        cache_ttl: Optional[int] = None,
        timeout: int = 30,
        client: Optional[SanityAPIClient] = None,
        cache: Optional[TTLCache] = None
    ):
        """
        Initialize the Sanity provider.

        Args:
            project_id: Sanity project identifier
            dataset: Dataset name
            api_token: Optional read token
            use_cdn: Query the API CDN
            api_version: Dated API version
            cache_ttl: Cache TTL in seconds (defaults to 1 hour)
            timeout: Request timeout in seconds
            client: Optional API client (Dependency Injection)
            cache: Optional cache instance (Dependency Injection)
        """
        self._logger = logging.getLogger(__name__)
        self._client = client if client is not None else SanityAPIClient(
            project_id,
            dataset,
            api_token=api_token,
            use_cdn=use_cdn,
            api_version=api_version,
            timeout=timeout
        )
        self._transformer = SanityTransformer(SanityImageBuilder(project_id, dataset))
        self._cache = cache if cache is not None else TTLCache(cache_ttl, name=self.name)

    def _query(self, groq: str, params: Optional[dict] = None):
        result = self._client.fetch(groq, params)
        return result if result is not None else []

    def _query_one(self, groq: str, params: Optional[dict] = None):
        """Run a ``[0...1]`` query; NOT_FOUND and empty results are both None."""
        try:
            result = self._client.fetch(groq, params)
        except CMSError as e:
            if e.code is CMSErrorCode.NOT_FOUND:
                return None
            raise
        if isinstance(result, list):
            return result[0] if result else None
        return result

    # Products

    def get_products(self, locale: LocaleLike) -> List[Product]:
        Locale.parse(locale)
        return self._cache.get_or_fetch(keys.PRODUCTS, self._fetch_products)

    def _fetch_products(self) -> List[Product]:
        docs = self._query(f'*[_type == "product"] | order(order asc) {PRODUCT_PROJECTION}')
        products = []
        with invalid_response_guard("Sanity", "product"):
            for doc in docs:
                try:
                    products.append(self._transformer.product(doc))
                except UnknownCategoryError as e:
                    self._logger.warning(f"Skipping product {doc.get('_id')}: {e}")
        return products

    def get_product_by_slug(self, slug: str, locale: LocaleLike) -> Optional[Product]:
        Locale.parse(locale)
        return self._cache.get_or_fetch(keys.product(slug), lambda: self._fetch_product(slug))

    def _fetch_product(self, slug: str) -> Optional[Product]:
        doc = self._query_one(
            f'*[_type == "product" && slug.current == $slug][0...1] {PRODUCT_PROJECTION}',
            {"slug": slug}
        )
        if not doc:
            return None
        with invalid_response_guard("Sanity", "product"):
            return self._transformer.product(doc)

    def get_all_product_slugs(self) -> List[str]:
        return self._cache.get_or_fetch(keys.PRODUCT_SLUGS, lambda: self._fetch_slugs("product"))

    # Articles

    def get_articles(self, locale: LocaleLike, limit: Optional[int] = None) -> List[ArticleListItem]:
        Locale.parse(locale)
        limit = parse_limit(limit)
        return self._cache.get_or_fetch(keys.articles(limit), lambda: self._fetch_articles(limit))

    def _fetch_articles(self, limit: Optional[int]) -> List[ArticleListItem]:
        limit_clause = f"[0...{int(limit)}]" if limit else ""
        docs = self._query(
            f'*[_type == "article"] | order(publishedAt desc) {limit_clause} {ARTICLE_LIST_PROJECTION}'
        )
        with invalid_response_guard("Sanity", "article"):
            articles = [self._transformer.article_list_item(doc) for doc in docs]
        articles.sort(key=lambda article: article.published_at, reverse=True)
        return articles

    def get_article_by_slug(self, slug: str, locale: LocaleLike) -> Optional[Article]:
        Locale.parse(locale)
        return self._cache.get_or_fetch(keys.article(slug), lambda: self._fetch_article(slug))

    def _fetch_article(self, slug: str) -> Optional[Article]:
        doc = self._query_one(
            f'*[_type == "article" && slug.current == $slug][0...1] {ARTICLE_PROJECTION}',
            {"slug": slug}
        )
        if not doc:
            return None
        with invalid_response_guard("Sanity", "article"):
            return self._transformer.article(doc)

    def get_all_article_slugs(self) -> List[str]:
        return self._cache.get_or_fetch(keys.ARTICLE_SLUGS, lambda: self._fetch_slugs("article"))

    # Team members

    def get_team_members(self, locale: LocaleLike) -> List[TeamMember]:
        Locale.parse(locale)
        return self._cache.get_or_fetch(keys.TEAM_MEMBERS, self._fetch_team_members)

    def _fetch_team_members(self) -> List[TeamMember]:
        docs = self._query(f'*[_type == "teamMember"] | order(order asc) {TEAM_MEMBER_PROJECTION}')
        with invalid_response_guard("Sanity", "team member"):
            members = [self._transformer.team_member(doc) for doc in docs]
        return sorted(members, key=lambda member: member.order)

    # Export statistics

    def get_export_statistics(self) -> Optional[ExportStatistics]:
        return self._cache.get_or_fetch(keys.EXPORT_STATISTICS, self._fetch_export_statistics)

    def _fetch_export_statistics(self) -> Optional[ExportStatistics]:
        doc = self._query_one(f'*[_type == "exportStatistics"][0...1] {EXPORT_STATISTICS_PROJECTION}')
        if not doc:
            return None
        with invalid_response_guard("Sanity", "export statistics"):
            return self._transformer.export_statistics(doc)

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

    def _fetch_slugs(self, document_type: str) -> List[str]:
        docs = self._query(f'*[_type == "{document_type}" && defined(slug.current)] {{ "slug": slug.current }}')
        with invalid_response_guard("Sanity", "slug"):
            return [doc["slug"] for doc in docs]
