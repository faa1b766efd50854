"""Interface for headless content backends (Strategy Pattern).

This allows switching between different content management systems:
- Strapi (REST, locale-suffixed fields)
- Sanity (GROQ, locale objects)
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Union

from cms_gateway.domain.entities.article import Article, ArticleListItem
from cms_gateway.domain.entities.export_statistics import ExportStatistics
from cms_gateway.domain.entities.product import Product
from cms_gateway.domain.entities.team_member import TeamMember
from cms_gateway.domain.value_objects.locale import Locale

LocaleLike = Union[Locale, str]


def parse_limit(limit: Optional[int]) -> Optional[int]:
    """
    Normalize an article list limit.

    ``None`` and ``0`` mean no limit.

    Raises:
        ValueError: If the limit is negative or not an integer
    """
    if limit is None:
        return None
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValueError(f"Article limit must be an integer, got {limit!r}")
    if limit < 0:
        raise ValueError(f"Article limit must not be negative, got {limit}")
    return limit or None


class ContentType(str, Enum):
    """Content families that can be invalidated independently."""

    PRODUCT = "product"
    ARTICLE = "article"
    TEAM = "team"
    STATISTICS = "statistics"
    ALL = "all"


class IContentProvider(ABC):
    """
    Interface for content providers following Strategy Pattern.

    Implementations can be swapped without changing page rendering code.
    Every returned entity carries complete LocalizedContent fields, so the
    ``locale`` arguments only select and validate the caller's context.

    Failures surface as ``CMSError``; a missing slug is ``None``, not an error.
    """

    @abstractmethod
    def get_products(self, locale: LocaleLike) -> List[Product]:
        """
        Fetch all products.

        Args:
            locale: Caller's locale

        Returns:
            List of products in backend display order

        Raises:
            CMSError: If the backend fails and no cached copy exists
        """
        pass

    @abstractmethod
    def get_product_by_slug(self, slug: str, locale: LocaleLike) -> Optional[Product]:
        """
        Fetch a single product by slug.

        Args:
            slug: Product slug
            locale: Caller's locale

        Returns:
            Product if found, None otherwise
        """
        pass

    @abstractmethod
    def get_all_product_slugs(self) -> List[str]:
        """Fetch every product slug (for static page enumeration)."""
        pass

    @abstractmethod
    def get_articles(self, locale: LocaleLike, limit: Optional[int] = None) -> List[ArticleListItem]:
        """
        Fetch article list items, newest first.

        Args:
            locale: Caller's locale
            limit: Optional maximum number of articles (``None`` or ``0`` for all)

        Returns:
            Articles ordered by publication date descending

        Raises:
            ValueError: If ``limit`` is negative
        """
        pass

    @abstractmethod
    def get_article_by_slug(self, slug: str, locale: LocaleLike) -> Optional[Article]:
        """
        Fetch a single article by slug.

        Args:
            slug: Article slug
            locale: Caller's locale

        Returns:
            Article if found, None otherwise
        """
        pass

    @abstractmethod
    def get_all_article_slugs(self) -> List[str]:
        """Fetch every article slug (for static page enumeration)."""
        pass

    @abstractmethod
    def get_team_members(self, locale: LocaleLike) -> List[TeamMember]:
        """
        Fetch team members.

        Args:
            locale: Caller's locale

        Returns:
            Team members ordered by ``order`` ascending
        """
        pass

    @abstractmethod
    def get_export_statistics(self) -> Optional[ExportStatistics]:
        """Fetch the published export statistics snapshot, or None if there is none."""
        pass

    @abstractmethod
    def clear_cache(self) -> None:
        """Evict every cached entry of this provider. Never fetches, never raises."""
        pass

    @abstractmethod
    def invalidate(self, content_type: ContentType) -> int:
        """
        Evict cached entries for one content family.

        Args:
            content_type: Family to evict (ALL behaves like clear_cache)

        Returns:
            Number of evicted entries
        """
        pass
