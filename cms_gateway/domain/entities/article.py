"""Article domain entities for the news section."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from cms_gateway.domain.entities.product import Image
from cms_gateway.domain.value_objects.locale import LocalizedContent


@dataclass(frozen=True)
class ArticleCategory:
    id: str
    slug: str
    name: LocalizedContent


@dataclass(frozen=True)
class ArticleTag:
    id: str
    slug: str
    name: LocalizedContent


class AuthorKind(str, Enum):
    """Which variant an article author is."""

    TEAM = "team"
    EXTERNAL = "external"


@dataclass(frozen=True)
class ArticleAuthor:
    """
    Article author as a tagged variant.

    ``TEAM`` authors reference a team member (``id`` is the member id and
    ``avatar`` their photo); ``EXTERNAL`` authors are named contributors with
    an optional ``link``.
    """

    kind: AuthorKind
    id: str
    name: str
    avatar: Optional[str] = None
    link: Optional[str] = None

    @property
    def is_external(self) -> bool:
        return self.kind is AuthorKind.EXTERNAL


@dataclass(frozen=True)
class ArticleListItem:
    """Lighter article projection used by listing pages."""

    id: str
    slug: str
    title: LocalizedContent
    excerpt: LocalizedContent
    published_at: datetime
    featured_image: Optional[Image] = None
    category: Optional[ArticleCategory] = None


@dataclass(frozen=True)
class Article:
    """Full article entity; ``content`` holds serialized rich text per locale."""

    id: str
    slug: str
    title: LocalizedContent
    excerpt: LocalizedContent
    content: LocalizedContent
    published_at: datetime
    featured_image: Optional[Image] = None
    category: Optional[ArticleCategory] = None
    tags: Tuple[ArticleTag, ...] = ()
    author: Optional[ArticleAuthor] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_list_item(self) -> ArticleListItem:
        return ArticleListItem(
            id=self.id,
            slug=self.slug,
            title=self.title,
            excerpt=self.excerpt,
            published_at=self.published_at,
            featured_image=self.featured_image,
            category=self.category,
        )
