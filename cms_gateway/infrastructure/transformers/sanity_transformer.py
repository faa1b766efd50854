"""Transforms Sanity GROQ results into domain entities.

Sanity documents store translations as locale objects (``{"fr", "en",
"ru"}``); some legacy team member documents still hold a bare string name.
"""
import json
from typing import Any, Mapping, Optional

from cms_gateway.domain.entities.article import (
    Article,
    ArticleAuthor,
    ArticleCategory,
    ArticleListItem,
    AuthorKind,
)
from cms_gateway.domain.entities.export_statistics import (
    Destination,
    ExportKPI,
    ExportRegion,
    ExportStatistics,
    MonthlyVolume,
    ProductMixEntry,
    RegionExport,
)
from cms_gateway.domain.entities.product import (
    Certification,
    ConstellationConfig,
    Image,
    PackagingOption,
    Product,
)
from cms_gateway.domain.entities.team_member import TeamMember
from cms_gateway.domain.value_objects.locale import DEFAULT_LOCALE, SUPPORTED_LOCALES, LocalizedContent
from cms_gateway.infrastructure.transformers.images import SanityImageBuilder
from cms_gateway.infrastructure.transformers.localization import (
    as_float,
    as_int,
    as_list,
    as_str,
    first_text,
    known_values,
    localized_field,
    parse_datetime,
    product_category,
)

DEFAULT_CONSTELLATION_COLOR = "#D4A574"


class SanityTransformer:
    """Maps raw Sanity documents to domain entities."""

    def __init__(self, image_builder: SanityImageBuilder):
        self.images = image_builder

    def _image(self, raw: Optional[Mapping[str, Any]], width: int, height: int, alt: LocalizedContent) -> Image:
        return Image(url=self.images.url(raw, width, height), alt=alt, width=width, height=height)

    @staticmethod
    def _slug(doc: Mapping[str, Any]) -> str:
        slug = doc["slug"]
        return slug["current"] if isinstance(slug, Mapping) else slug

    @staticmethod
    def _category(value: Any) -> Optional[ArticleCategory]:
        # Article categories are plain strings in the Sanity schema
        if not value or not isinstance(value, str):
            return None
        return ArticleCategory(id=value, slug=value, name=LocalizedContent(value, value, value))

    @staticmethod
    def _content(value: Any) -> LocalizedContent:
        """
        Serialize portable text blocks per locale; the payload stays opaque.

        Legacy articles hold a bare block list, which belongs to the default
        locale only.
        """
        if isinstance(value, list):
            return LocalizedContent.single(json.dumps(value) if value else "", DEFAULT_LOCALE)
        if not isinstance(value, Mapping):
            return LocalizedContent()
        return LocalizedContent(**{
            locale.value: json.dumps(value[locale.value]) if value.get(locale.value) else ""
            for locale in SUPPORTED_LOCALES
        })

    def _team_author(self, member: Mapping[str, Any]) -> Optional[ArticleAuthor]:
        if not member or not member.get("_id"):
            return None
        return ArticleAuthor(
            kind=AuthorKind.TEAM,
            id=member["_id"],
            name=first_text(localized_field(member, "name")),
            avatar=self.images.url(member["photo"], 100) if member.get("photo") else None,
        )

    def author(self, raw: Optional[Mapping[str, Any]], article_id: str) -> Optional[ArticleAuthor]:
        """
        Resolve the article author variant.

        Handles three raw shapes:
        - tagged ``{"authorType": "team", "teamMember": {...}}``
        - tagged ``{"authorType": "external", "externalName": ..., "externalLink": ...}``
        - legacy direct team member reference ``{"_id", "name", "photo"}``
        """
        if not raw:
            return None

        tagged = any(raw.get(key) for key in ("authorType", "teamMember", "externalName"))
        if tagged:
            author_type = raw.get("authorType") or AuthorKind.TEAM.value
            if author_type == AuthorKind.TEAM.value:
                return self._team_author(raw.get("teamMember") or {})
            if author_type == AuthorKind.EXTERNAL.value and raw.get("externalName"):
                return ArticleAuthor(
                    kind=AuthorKind.EXTERNAL,
                    id=f"external-{article_id}",
                    name=raw["externalName"],
                    link=raw.get("externalLink") or None,
                )
            return None

        # Legacy records reference the team member directly, without a tag
        return self._team_author(raw)

    def product(self, doc: Mapping[str, Any]) -> Product:
        name = localized_field(doc, "name")
        packaging = doc.get("packaging") or {}
        packaging_type = packaging.get("type")
        if packaging_type:
            # Sanity packaging types are free text; unknown ones ship in bulk
            packaging_options = known_values([packaging_type], PackagingOption, "packaging option") or (PackagingOption.BULK,)
        else:
            packaging_options = ()
        origin = doc.get("origin") or {}
        return Product(
            id=doc["_id"],
            slug=self._slug(doc),
            name=name,
            description=localized_field(doc, "description"),
            category=product_category(doc["category"]),
            origin=(origin["region"],) if origin.get("region") else (),
            season=first_text(localized_field(doc, "availability")),
            certifications=known_values(as_list(doc.get("certifications")), Certification, "certification"),
            packaging_options=packaging_options,
            images=(self._image(doc.get("image"), 800, 600, name),) + tuple(
                self._image(image, 800, 600, name) for image in as_list(doc.get("gallery"))
            ),
            constellation=ConstellationConfig(color=DEFAULT_CONSTELLATION_COLOR),
            related_products=(),
            created_at=parse_datetime(doc.get("_createdAt")),
            updated_at=parse_datetime(doc.get("_updatedAt")),
        )

    def article(self, doc: Mapping[str, Any]) -> Article:
        title = localized_field(doc, "title")
        return Article(
            id=doc["_id"],
            slug=self._slug(doc),
            title=title,
            excerpt=localized_field(doc, "excerpt"),
            content=self._content(doc.get("content")),
            published_at=parse_datetime(doc.get("publishedAt")),
            featured_image=self._image(doc["image"], 1200, 630, title) if doc.get("image") else None,
            category=self._category(doc.get("category")),
            tags=(),
            author=self.author(doc.get("author"), doc["_id"]),
            created_at=parse_datetime(doc.get("_createdAt")),
            updated_at=parse_datetime(doc.get("_updatedAt")),
        )

    def article_list_item(self, doc: Mapping[str, Any]) -> ArticleListItem:
        title = localized_field(doc, "title")
        return ArticleListItem(
            id=doc["_id"],
            slug=self._slug(doc),
            title=title,
            excerpt=localized_field(doc, "excerpt"),
            published_at=parse_datetime(doc.get("publishedAt")),
            featured_image=self._image(doc["image"], 800, 450, title) if doc.get("image") else None,
            category=self._category(doc.get("category")),
        )

    def team_member(self, doc: Mapping[str, Any]) -> TeamMember:
        name = localized_field(doc, "name")
        return TeamMember(
            id=doc["_id"],
            name=name,
            role=localized_field(doc, "role"),
            bio=localized_field(doc, "bio"),
            photo=self._image(doc["photo"], 400, 400, name) if doc.get("photo") else None,
            is_ceo=doc.get("department") == "management",
            order=as_int(doc.get("order")),
            email=doc.get("email") or None,
            linkedin=doc.get("linkedin") or None,
        )

    def export_statistics(self, doc: Mapping[str, Any]) -> ExportStatistics:
        kpi = doc.get("kpi") or {}
        return ExportStatistics(
            last_updated=parse_datetime(doc.get("lastUpdated"), default=None),
            kpi=ExportKPI(
                tonnes_exported=as_float(kpi.get("tonnesExported")),
                countries_served=as_int(kpi.get("countriesServed")),
                producer_partners=as_int(kpi.get("producerPartners")),
                years_experience=as_int(kpi.get("yearsExperience")),
                traced_lots=as_float(kpi.get("tracedLots")),
            ),
            exports_by_region=tuple(
                RegionExport(
                    region=ExportRegion(item["region"]) if item.get("region") in _REGIONS else ExportRegion.OTHER,
                    percentage=as_float(item.get("percentage")),
                    countries=tuple(as_list(item.get("countries"))),
                )
                for item in as_list(doc.get("exportsByRegion"))
            ),
            top_destinations=tuple(
                Destination(
                    country=as_str(item.get("country")),
                    country_code=as_str(item.get("countryCode")),
                    percentage=as_float(item.get("percentage")),
                    port=item.get("port") or None,
                )
                for item in as_list(doc.get("topDestinations"))
            ),
            monthly_volumes=tuple(
                MonthlyVolume(
                    month=as_str(item.get("month")),
                    year=as_int(item.get("year")),
                    volume=as_float(item.get("volume")),
                )
                for item in as_list(doc.get("monthlyVolumes"))
            ),
            product_mix=tuple(
                ProductMixEntry(
                    product=as_str(item.get("product")),
                    slug=as_str(item.get("slug")),
                    volume=as_float(item.get("volume")),
                    percentage=as_float(item.get("percentage")),
                    color=as_str(item.get("color")),
                )
                for item in as_list(doc.get("productMix"))
            ),
        )


_REGIONS = {region.value for region in ExportRegion}
