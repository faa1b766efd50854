"""Product domain entities."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from cms_gateway.domain.value_objects.locale import Locale, LocalizedContent


class ProductCategory(str, Enum):
    """Commodity categories exported by the company."""

    CACAO = "cacao"
    CAFE = "cafe"
    BOIS = "bois"
    MAIS = "mais"
    HEVEA = "hevea"
    SESAME = "sesame"
    CAJOU = "cajou"
    AMANDES = "amandes"
    SORGHO = "sorgho"
    SOJA = "soja"


class Certification(str, Enum):
    RAINFOREST_ALLIANCE = "rainforest-alliance"
    UTZ = "utz"
    FAIRTRADE = "fairtrade"
    ORGANIC = "organic"


class PackagingOption(str, Enum):
    BULK = "bulk"
    BAGS = "bags"
    CONTAINERS = "containers"


@dataclass(frozen=True)
class Image:
    """Resolved image with absolute URL and localized alt text."""

    url: str
    alt: LocalizedContent = field(default_factory=LocalizedContent)
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class ConstellationNode:
    id: str
    position: Tuple[float, float, float]
    size: float
    label: Optional[str] = None


@dataclass(frozen=True)
class ConstellationConfig:
    """Decorative 3D constellation settings, passed through untouched."""

    nodes: Tuple[ConstellationNode, ...] = ()
    connections: Tuple[Tuple[int, int], ...] = ()
    color: str = "#ffffff"
    glow_intensity: float = 1.0
    animation_speed: float = 1.0


@dataclass(frozen=True)
class Product:
    """
    Product entity.

    ``slug`` is the external lookup key; ``id`` is the backend identity and
    is never used to build URLs.
    """

    id: str
    slug: str
    name: LocalizedContent
    description: LocalizedContent
    category: ProductCategory
    origin: Tuple[str, ...] = ()
    season: str = ""
    certifications: Tuple[Certification, ...] = ()
    packaging_options: Tuple[PackagingOption, ...] = ()
    images: Tuple[Image, ...] = ()
    constellation: ConstellationConfig = field(default_factory=ConstellationConfig)
    related_products: Tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate product entity."""
        if not self.slug:
            raise ValueError("slug is required")

    def localized_name(self, locale: Locale) -> str:
        return self.name.resolve(locale)

    def localized_description(self, locale: Locale) -> str:
        return self.description.resolve(locale)
