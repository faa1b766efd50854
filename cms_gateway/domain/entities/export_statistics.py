"""Export statistics snapshot entity."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class ExportRegion(str, Enum):
    EU = "eu"
    ASIA = "asia"
    USA = "usa"
    AFRICA = "africa"
    OTHER = "other"


@dataclass(frozen=True)
class ExportKPI:
    tonnes_exported: float = 0
    countries_served: int = 0
    producer_partners: int = 0
    years_experience: int = 0
    traced_lots: float = 0


@dataclass(frozen=True)
class RegionExport:
    region: ExportRegion
    percentage: float
    countries: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Destination:
    country: str
    country_code: str
    percentage: float
    port: Optional[str] = None


@dataclass(frozen=True)
class MonthlyVolume:
    month: str
    year: int
    volume: float


@dataclass(frozen=True)
class ProductMixEntry:
    product: str
    slug: str
    volume: float
    percentage: float
    color: str


@dataclass(frozen=True)
class ExportStatistics:
    """The currently published statistics snapshot; it has no identity of its own."""

    last_updated: Optional[datetime]
    kpi: ExportKPI = field(default_factory=ExportKPI)
    exports_by_region: Tuple[RegionExport, ...] = ()
    top_destinations: Tuple[Destination, ...] = ()
    monthly_volumes: Tuple[MonthlyVolume, ...] = ()
    product_mix: Tuple[ProductMixEntry, ...] = ()
