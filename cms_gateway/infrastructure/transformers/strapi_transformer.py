"""Transforms Strapi REST payloads into domain entities.

Strapi records store translations as suffixed sibling fields (``name_fr``,
``name_en``, ``name_ru``) and use snake_case attribute names. Both the flat
(v3) layout and the ``{"id", "attributes"}`` (v4) envelope are accepted.
"""
from typing import Any, Dict, List, Mapping, Optional

from cms_gateway.domain.entities.article import (
    Article,
    ArticleAuthor,
    ArticleCategory,
    ArticleListItem,
    ArticleTag,
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
    ConstellationNode,
    Image,
    PackagingOption,
    Product,
)
from cms_gateway.domain.entities.team_member import TeamMember
from cms_gateway.domain.value_objects.locale import LocalizedContent
from cms_gateway.infrastructure.transformers.images import StrapiImageBuilder, unwrap_media
from cms_gateway.infrastructure.transformers.localization import (
    PLACEHOLDER_IMAGE_URL,
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


def unwrap_entry(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Flatten a v4 ``{"id", "attributes"}`` entry; flat entries pass through."""
    if "attributes" in raw and isinstance(raw["attributes"], Mapping):
        return {"id": raw.get("id"), **raw["attributes"]}
    return dict(raw)


def unwrap_relation(value: Any) -> Any:
    """Unwrap a relation that may be a ``{"data": ...}`` envelope holding one entry or a list."""
    if isinstance(value, Mapping) and "data" in value:
        value = value["data"]
    if value is None:
        return None
    if isinstance(value, list):
        return [unwrap_entry(item) for item in value if isinstance(item, Mapping)]
    if isinstance(value, Mapping):
        return unwrap_entry(value)
    return value


def _field(raw: Mapping[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in raw:
        return raw[snake]
    return raw.get(camel, default)


class StrapiTransformer:
    """Maps raw Strapi entries to domain entities."""

    PRODUCT_IMAGE_SIZE = (800, 600)
    ARTICLE_IMAGE_SIZE = (1200, 630)
    LIST_IMAGE_SIZE = (800, 450)
    PHOTO_SIZE = (400, 400)
    AVATAR_WIDTH = 100

    def __init__(self, image_builder: StrapiImageBuilder):
        self.images = image_builder

    # Shared pieces

    def _image(self, raw: Any, size: tuple, fallback_alt: Optional[LocalizedContent] = None) -> Image:
        media = unwrap_media(raw)
        url, width, height = self.images.resolve(media, size[0])
        alt = localized_field(media, "alt")
        if not any(alt.values()):
            alt = localized_field(media, "alternativeText")
        if not any(alt.values()) and fallback_alt is not None:
            alt = fallback_alt
        if url == PLACEHOLDER_IMAGE_URL or not width:
            width, height = size
        return Image(url=url, alt=alt, width=width, height=height)

    def _optional_image(self, raw: Any, size: tuple, fallback_alt: Optional[LocalizedContent] = None) -> Optional[Image]:
        media = unwrap_media(raw)
        if not media or not media.get("url"):
            return None
        return self._image(media, size, fallback_alt)

    @staticmethod
    def _category(raw: Any) -> Optional[ArticleCategory]:
        category = unwrap_relation(raw)
        if not isinstance(category, Mapping):
            return None
        return ArticleCategory(
            id=str(category["id"]),
            slug=category["slug"],
            name=localized_field(category, "name"),
        )

    @staticmethod
    def _tags(raw: Any) -> tuple:
        return tuple(
            ArticleTag(id=str(tag["id"]), slug=tag["slug"], name=localized_field(tag, "name"))
            for tag in as_list(unwrap_relation(raw))
        )

    @staticmethod
    def _constellation(raw: Optional[Mapping[str, Any]]) -> ConstellationConfig:
        if not raw:
            return ConstellationConfig()
        return ConstellationConfig(
            nodes=tuple(
                ConstellationNode(
                    id=str(node["id"]),
                    position=tuple(as_float(axis) for axis in node["position"]),
                    size=as_float(node.get("size"), 1.0),
                    label=node.get("label"),
                )
                for node in as_list(raw.get("nodes"))
            ),
            connections=tuple(tuple(pair) for pair in as_list(raw.get("connections"))),
            color=as_str(raw.get("color"), "#ffffff"),
            glow_intensity=as_float(_field(raw, "glow_intensity", "glowIntensity"), 1.0),
            animation_speed=as_float(_field(raw, "animation_speed", "animationSpeed"), 1.0),
        )

    def _author(self, raw: Any) -> Optional[ArticleAuthor]:
        """
        Resolve the author variant.

        Strapi authors are either tagged with ``author_type`` or carry an
        ``is_external`` flag; anything else is a team member.
        """
        author = unwrap_relation(raw)
        if not isinstance(author, Mapping):
            return None
        author_type = _field(author, "author_type", "authorType")
        external = author_type == AuthorKind.EXTERNAL.value or bool(_field(author, "is_external", "isExternal"))
        name = first_text(localized_field(author, "name"))
        if not name:
            return None
        avatar = author.get("avatar")
        if isinstance(avatar, Mapping):
            photo = self._optional_image(avatar, (self.AVATAR_WIDTH, self.AVATAR_WIDTH))
            avatar_url = photo.url if photo else None
        elif isinstance(avatar, str) and avatar:
            avatar_url = self.images.absolute(avatar)
        else:
            avatar_url = None
        if external:
            return ArticleAuthor(
                kind=AuthorKind.EXTERNAL,
                id=str(author.get("id") or f"external-{name}"),
                name=name,
                link=author.get("link"),
            )
        return ArticleAuthor(
            kind=AuthorKind.TEAM,
            id=str(author["id"]),
            name=name,
            avatar=avatar_url,
        )

    # Entities

    def product(self, raw: Mapping[str, Any]) -> Product:
        entry = unwrap_entry(raw)
        name = localized_field(entry, "name")
        images = tuple(
            self._image(image, self.PRODUCT_IMAGE_SIZE, fallback_alt=name)
            for image in as_list(unwrap_relation(entry.get("images")))
        ) or (self._image(None, self.PRODUCT_IMAGE_SIZE, fallback_alt=name),)
        return Product(
            id=str(entry["id"]),
            slug=entry["slug"],
            name=name,
            description=localized_field(entry, "description"),
            category=product_category(entry["category"]),
            origin=tuple(str(region) for region in as_list(entry.get("origin"))),
            season=as_str(entry.get("season")),
            certifications=known_values(as_list(entry.get("certifications")), Certification, "certification"),
            packaging_options=known_values(
                as_list(_field(entry, "packaging_options", "packagingOptions")), PackagingOption, "packaging option"
            ),
            images=images,
            constellation=self._constellation(_field(entry, "constellation_config", "constellationConfig")),
            related_products=tuple(
                related["slug"] for related in as_list(unwrap_relation(_field(entry, "related_products", "relatedProducts")))
                if isinstance(related, Mapping) and related.get("slug")
            ),
            created_at=parse_datetime(_field(entry, "created_at", "createdAt")),
            updated_at=parse_datetime(_field(entry, "updated_at", "updatedAt")),
        )

    def article(self, raw: Mapping[str, Any]) -> Article:
        entry = unwrap_entry(raw)
        title = localized_field(entry, "title")
        return Article(
            id=str(entry["id"]),
            slug=entry["slug"],
            title=title,
            excerpt=localized_field(entry, "excerpt"),
            content=localized_field(entry, "content"),
            published_at=parse_datetime(_field(entry, "published_at", "publishedAt")),
            featured_image=self._optional_image(
                _field(entry, "featured_image", "featuredImage"), self.ARTICLE_IMAGE_SIZE, fallback_alt=title
            ),
            category=self._category(entry.get("category")),
            tags=self._tags(entry.get("tags")),
            author=self._author(entry.get("author")),
            created_at=parse_datetime(_field(entry, "created_at", "createdAt")),
            updated_at=parse_datetime(_field(entry, "updated_at", "updatedAt")),
        )

    def article_list_item(self, raw: Mapping[str, Any]) -> ArticleListItem:
        entry = unwrap_entry(raw)
        title = localized_field(entry, "title")
        return ArticleListItem(
            id=str(entry["id"]),
            slug=entry["slug"],
            title=title,
            excerpt=localized_field(entry, "excerpt"),
            published_at=parse_datetime(_field(entry, "published_at", "publishedAt")),
            featured_image=self._optional_image(
                _field(entry, "featured_image", "featuredImage"), self.LIST_IMAGE_SIZE, fallback_alt=title
            ),
            category=self._category(entry.get("category")),
        )

    def team_member(self, raw: Mapping[str, Any]) -> TeamMember:
        entry = unwrap_entry(raw)
        name = localized_field(entry, "name")
        return TeamMember(
            id=str(entry["id"]),
            name=name,
            role=localized_field(entry, "role"),
            bio=localized_field(entry, "bio"),
            photo=self._optional_image(entry.get("photo"), self.PHOTO_SIZE, fallback_alt=name),
            is_ceo=bool(_field(entry, "is_ceo", "isCEO", False)),
            order=as_int(entry.get("order")),
            email=entry.get("email") or None,
            linkedin=entry.get("linkedin") or None,
        )

    def slugs(self, items: List[Mapping[str, Any]]) -> List[str]:
        return [unwrap_entry(item)["slug"] for item in items]

    def export_statistics(self, raw: Mapping[str, Any]) -> ExportStatistics:
        entry = unwrap_entry(raw)
        kpi = entry.get("kpi") or {}
        return ExportStatistics(
            last_updated=parse_datetime(_field(entry, "last_updated", "lastUpdated"), default=None),
            kpi=ExportKPI(
                tonnes_exported=as_float(kpi.get("tonnes_exported")),
                countries_served=as_int(kpi.get("countries_served")),
                producer_partners=as_int(kpi.get("producer_partners")),
                years_experience=as_int(kpi.get("years_experience")),
                traced_lots=as_float(kpi.get("traced_lots")),
            ),
            exports_by_region=tuple(
                RegionExport(
                    region=_region(item.get("region")),
                    percentage=as_float(item.get("percentage")),
                    countries=tuple(as_list(item.get("countries"))),
                )
                for item in as_list(entry.get("exports_by_region"))
            ),
            top_destinations=tuple(
                Destination(
                    country=as_str(item.get("country")),
                    country_code=as_str(item.get("country_code")),
                    percentage=as_float(item.get("percentage")),
                    port=item.get("port") or None,
                )
                for item in as_list(entry.get("top_destinations"))
            ),
            monthly_volumes=tuple(
                MonthlyVolume(
                    month=as_str(item.get("month")),
                    year=as_int(item.get("year")),
                    volume=as_float(item.get("volume")),
                )
                for item in as_list(entry.get("monthly_volumes"))
            ),
            product_mix=tuple(
                ProductMixEntry(
                    product=as_str(item.get("product")),
                    slug=as_str(item.get("slug")),
                    volume=as_float(item.get("volume")),
                    percentage=as_float(item.get("percentage")),
                    color=as_str(item.get("color")),
                )
                for item in as_list(entry.get("product_mix"))
            ),
        )


def _region(value: Any) -> ExportRegion:
    try:
        return ExportRegion(value)
    except ValueError:
        return ExportRegion.OTHER
