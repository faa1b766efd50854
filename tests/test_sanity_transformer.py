"""Tests for the Sanity transformer and image builder."""

import json

import pytest

from cms_gateway.domain.entities import AuthorKind, Certification, PackagingOption
from cms_gateway.domain.value_objects.locale import SUPPORTED_LOCALES
from cms_gateway.infrastructure.transformers import (
    PLACEHOLDER_IMAGE_URL,
    SanityImageBuilder,
    SanityTransformer,
)


@pytest.fixture
def builder():
    return SanityImageBuilder("abc123", "production")


@pytest.fixture
def transformer(builder):
    return SanityTransformer(builder)


class TestSanityImageBuilder:
    def test_builds_cdn_url(self, builder):
        url = builder.url({"asset": {"_ref": "image-abc123def-2000x1500-jpg"}}, 400)

        assert url == (
            "https://cdn.sanity.io/images/abc123/production/abc123def-2000x1500.jpg"
            "?w=400&h=400&fit=crop&auto=format&q=85"
        )

    def test_hotspot_sets_focal_point(self, builder):
        url = builder.url({"asset": {"_ref": "image-abc-10x10-png"}, "hotspot": {"x": 0.3, "y": 0.6}}, 100, 50)

        assert "h=50" in url
        assert "crop=focalpoint&fp-x=0.3&fp-y=0.6" in url

    @pytest.mark.parametrize("image", [None, {}, {"asset": {}}, {"asset": {"_ref": "file-abc-pdf"}}])
    def test_missing_or_malformed_refs_use_placeholder(self, builder, image):
        assert builder.url(image) == PLACEHOLDER_IMAGE_URL


class TestProduct:
    def test_product(self, transformer, sanity_product):
        product = transformer.product(sanity_product)

        assert product.id == "product-cacao"
        assert product.slug == "cacao"
        assert product.description["ru"] == "Бобы"
        assert product.name["ru"] == ""
        assert product.origin == ("Soubré",)
        assert product.season == "Toute l'année"
        assert product.certifications == (Certification.RAINFOREST_ALLIANCE,)
        assert product.packaging_options == (PackagingOption.BULK,)
        assert len(product.images) == 2
        assert product.images[0].url.startswith("https://cdn.sanity.io/images/abc123/production/abc123def-2000x1500.jpg")
        assert product.constellation.color == "#D4A574"

    def test_product_without_image_gets_placeholder(self, transformer, sanity_product):
        del sanity_product["image"]
        del sanity_product["gallery"]

        product = transformer.product(sanity_product)

        assert [image.url for image in product.images] == [PLACEHOLDER_IMAGE_URL]


class TestAuthorVariants:
    def test_tagged_external(self, transformer):
        author = transformer.author({"authorType": "external", "externalName": "Jane Doe"}, "article-1")

        assert author.kind is AuthorKind.EXTERNAL
        assert author.name == "Jane Doe"
        assert author.is_external is True
        assert author.id == "external-article-1"

    def test_tagged_team_member(self, transformer):
        author = transformer.author(
            {
                "authorType": "team",
                "teamMember": {
                    "_id": "member-1",
                    "name": {"fr": "Awa Koné", "en": "Awa Kone"},
                    "photo": {"asset": {"_ref": "image-aa11-400x400-jpg"}},
                },
            },
            "article-1",
        )

        assert author.kind is AuthorKind.TEAM
        assert author.id == "member-1"
        assert author.name == "Awa Koné"
        assert "w=100" in author.avatar
        assert author.is_external is False

    def test_legacy_untagged_reference_is_team_member(self, transformer):
        author = transformer.author({"_id": "member-2", "name": "Yao Kouassi"}, "article-1")

        assert author.kind is AuthorKind.TEAM
        assert author.id == "member-2"
        assert author.name == "Yao Kouassi"
        assert author.avatar is None

    def test_legacy_projection_with_null_tag_fields(self, transformer):
        raw = {"authorType": None, "teamMember": None, "externalName": None, "_id": "member-3", "name": "Ama"}

        assert transformer.author(raw, "article-1").kind is AuthorKind.TEAM

    @pytest.mark.parametrize("raw", [None, {}, {"authorType": "external"}, {"authorType": "team"}])
    def test_unresolvable_authors_are_absent(self, transformer, raw):
        assert transformer.author(raw, "article-1") is None


class TestArticle:
    def test_article(self, transformer, sanity_article):
        article = transformer.article(sanity_article)

        assert article.slug == "nouvelles"
        assert article.excerpt.to_dict() == {"fr": "Résumé", "en": "", "ru": ""}
        assert json.loads(article.content["fr"])[0]["_type"] == "block"
        assert article.content["en"] == ""
        assert article.category.slug == "entreprise"
        assert article.category.name["ru"] == "entreprise"
        assert (article.featured_image.width, article.featured_image.height) == (1200, 630)
        assert article.author.is_external

    def test_legacy_bare_block_list_goes_to_default_locale(self, transformer, sanity_article):
        sanity_article["content"] = [{"_type": "block", "children": [{"text": "Ancien"}]}]

        article = transformer.article(sanity_article)

        assert json.loads(article.content["fr"])[0]["children"][0]["text"] == "Ancien"
        assert article.content["en"] == article.content["ru"] == ""

    @pytest.mark.parametrize("content", [None, [], "plain text", 42])
    def test_other_content_shapes_are_empty(self, transformer, sanity_article, content):
        sanity_article["content"] = content

        assert transformer.article(sanity_article).content.to_dict() == {"fr": "", "en": "", "ru": ""}

    def test_list_item_uses_lighter_image(self, transformer, sanity_article):
        item = transformer.article_list_item(sanity_article)

        assert (item.featured_image.width, item.featured_image.height) == (800, 450)
        assert item.title == transformer.article(sanity_article).title


class TestTeamMember:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Awa Koné", {"fr": "Awa Koné", "en": "", "ru": ""}),
            ({"fr": "Awa Koné", "en": "Awa Kone"}, {"fr": "Awa Koné", "en": "Awa Kone", "ru": ""}),
        ],
    )
    def test_name_formats(self, transformer, name, expected):
        member = transformer.team_member({
            "_id": "m1",
            "name": name,
            "role": {"fr": "Directrice"},
            "department": "management",
            "order": 2,
        })

        assert member.name.to_dict() == expected
        assert set(member.role) == set(SUPPORTED_LOCALES)
        assert member.is_ceo
        assert member.order == 2


class TestExportStatistics:
    def test_defaults_for_missing_blocks(self, transformer):
        stats = transformer.export_statistics({"lastUpdated": "2024-06-30T00:00:00Z"})

        assert stats.kpi.countries_served == 0
        assert stats.exports_by_region == ()
        assert stats.product_mix == ()

    def test_camel_case_snapshot(self, transformer):
        stats = transformer.export_statistics({
            "lastUpdated": "2024-06-30T00:00:00Z",
            "kpi": {"tonnesExported": 5000, "tracedLots": 98.5},
            "exportsByRegion": [{"region": "asia", "percentage": 20}],
            "topDestinations": [{"country": "Chine", "countryCode": "CN", "percentage": 20}],
        })

        assert stats.kpi.traced_lots == 98.5
        assert stats.exports_by_region[0].region.value == "asia"
        assert stats.exports_by_region[0].countries == ()
        assert stats.top_destinations[0].port is None
