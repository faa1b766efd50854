"""Domain entities - core business objects."""
from cms_gateway.domain.entities.product import (
    Certification,
    ConstellationConfig,
    ConstellationNode,
    Image,
    PackagingOption,
    Product,
    ProductCategory,
)
from cms_gateway.domain.entities.article import (
    Article,
    ArticleAuthor,
    ArticleCategory,
    ArticleListItem,
    ArticleTag,
    AuthorKind,
)
from cms_gateway.domain.entities.team_member import TeamMember, get_ceo, sort_team_members
from cms_gateway.domain.entities.export_statistics import (
    Destination,
    ExportKPI,
    ExportRegion,
    ExportStatistics,
    MonthlyVolume,
    ProductMixEntry,
    RegionExport,
)

__all__ = [
    "Certification",
    "ConstellationConfig",
    "ConstellationNode",
    "Image",
    "PackagingOption",
    "Product",
    "ProductCategory",
    "Article",
    "ArticleAuthor",
    "ArticleCategory",
    "ArticleListItem",
    "ArticleTag",
    "AuthorKind",
    "TeamMember",
    "get_ceo",
    "sort_team_members",
    "Destination",
    "ExportKPI",
    "ExportRegion",
    "ExportStatistics",
    "MonthlyVolume",
    "ProductMixEntry",
    "RegionExport",
]
