"""Cache key scheme shared by all content providers.

Keys never include a locale: entities carry every locale, so one entry serves
all of them.
"""
from typing import Optional, Tuple

from cms_gateway.domain.interfaces.content_provider import ContentType

PRODUCTS = "products"
PRODUCT_SLUGS = "product-slugs"
ARTICLE_SLUGS = "article-slugs"
TEAM_MEMBERS = "team-members"
EXPORT_STATISTICS = "export-statistics"


def product(slug: str) -> str:
    return f"product:{slug}"


def article(slug: str) -> str:
    return f"article:{slug}"


def articles(limit: Optional[int] = None) -> str:
    return f"articles:{limit if limit else 'all'}"


# "product" covers products, product:<slug> and product-slugs
PREFIXES_BY_CONTENT_TYPE = {
    ContentType.PRODUCT: ("product",),
    ContentType.ARTICLE: ("article",),
    ContentType.TEAM: (TEAM_MEMBERS,),
    ContentType.STATISTICS: (EXPORT_STATISTICS,),
}


def prefixes_for(content_type: ContentType) -> Tuple[str, ...]:
    """Key prefixes owned by a content type (ALL is handled by clearing the cache)."""
    return PREFIXES_BY_CONTENT_TYPE.get(ContentType(content_type), ())
