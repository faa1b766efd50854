import pytest

from cms_gateway.config.settings import TestingConfig
from cms_gateway.infrastructure.service_container import ServiceContainer


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StrapiTestConfig(TestingConfig):
    CMS_PROVIDER = "strapi"
    STRAPI_URL = "https://cms.example.com"
    STRAPI_API_TOKEN = "strapi-token"
    CMS_CACHE_TTL = 60


class SanityTestConfig(TestingConfig):
    CMS_PROVIDER = "sanity"
    SANITY_PROJECT_ID = "abc123"
    SANITY_DATASET = "production"
    SANITY_API_TOKEN = None
    CMS_CACHE_TTL = 120


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def strapi_config():
    return StrapiTestConfig


@pytest.fixture
def sanity_config():
    return SanityTestConfig


@pytest.fixture(autouse=True)
def reset_service_container():
    ServiceContainer.reset()
    yield
    ServiceContainer.reset()


@pytest.fixture
def strapi_product():
    return {
        "id": 7,
        "slug": "cacao-grade-1",
        "name_fr": "Cacao grade 1",
        "name_en": "Grade 1 cocoa",
        "description_fr": "Fèves fermentées",
        "description_en": "Fermented beans",
        "category": "cacao",
        "origin": ["Soubré", "Daloa"],
        "season": "Octobre - Mars",
        "certifications": ["fairtrade", "organic", "unknown-label"],
        "packaging_options": ["bags", "bulk"],
        "images": [
            {
                "url": "/uploads/cacao.jpg",
                "alt_fr": "Fèves de cacao",
                "alt_en": "Cocoa beans",
                "width": 2000,
                "height": 1500,
                "formats": {
                    "small": {"url": "/uploads/small_cacao.jpg", "width": 500, "height": 375},
                    "medium": {"url": "/uploads/medium_cacao.jpg", "width": 1000, "height": 750},
                },
            }
        ],
        "constellation_config": {
            "nodes": [{"id": "n1", "position": [0, 1, 2], "size": 2, "label": "Soubré"}],
            "connections": [[0, 0]],
            "color": "#8B4513",
            "glowIntensity": 1.5,
            "animationSpeed": 0.5,
        },
        "related_products": [{"id": 8, "slug": "cafe-robusta"}],
        "createdAt": "2024-01-10T08:00:00.000Z",
        "updatedAt": "2024-02-01T09:30:00.000Z",
    }


@pytest.fixture
def strapi_article():
    return {
        "id": 3,
        "slug": "recolte-2024",
        "title_fr": "Récolte 2024",
        "title_en": "2024 harvest",
        "excerpt_fr": "Bilan",
        "excerpt_en": "Review",
        "content_fr": "# Bilan",
        "content_en": "# Review",
        "featured_image": {"url": "https://media.example.com/harvest.jpg", "width": 1600, "height": 900},
        "category": {"id": 1, "slug": "marches", "name_fr": "Marchés", "name_en": "Markets"},
        "tags": [{"id": 4, "slug": "cacao", "name_fr": "Cacao", "name_en": "Cocoa"}],
        "author": {"id": 12, "name": "Awa Koné", "avatar": "/uploads/awa.jpg"},
        "published_at": "2024-03-05T10:00:00Z",
        "createdAt": "2024-03-01T10:00:00Z",
        "updatedAt": "2024-03-06T10:00:00Z",
    }


@pytest.fixture
def sanity_product():
    return {
        "_id": "product-cacao",
        "name": {"fr": "Cacao", "en": "Cocoa"},
        "slug": {"current": "cacao"},
        "description": {"fr": "Fèves", "en": "Beans", "ru": "Бобы"},
        "category": "cacao",
        "image": {"_type": "image", "asset": {"_ref": "image-abc123def-2000x1500-jpg", "_type": "reference"}},
        "gallery": [{"_type": "image", "asset": {"_ref": "image-fff000-800x600-png", "_type": "reference"}}],
        "origin": {"region": "Soubré", "country": "CI"},
        "packaging": {"type": "jute bags", "weight": 65},
        "certifications": ["rainforest-alliance"],
        "availability": {"fr": "Toute l'année", "en": "All year"},
        "order": 1,
        "_createdAt": "2024-01-01T00:00:00Z",
        "_updatedAt": "2024-01-02T00:00:00Z",
    }


@pytest.fixture
def sanity_article():
    return {
        "_id": "article-1",
        "title": {"fr": "Nouvelles", "en": "News"},
        "slug": {"current": "nouvelles"},
        "category": "entreprise",
        "excerpt": {"fr": "Résumé"},
        "content": {"fr": [{"_type": "block", "children": [{"text": "Bonjour"}]}]},
        "image": {"asset": {"_ref": "image-0a1b2c-1200x630-jpg"}},
        "publishedAt": "2024-05-01T12:00:00Z",
        "author": {"authorType": "external", "externalName": "Jane Doe", "externalLink": "https://jane.example"},
        "_createdAt": "2024-04-30T12:00:00Z",
        "_updatedAt": "2024-05-02T12:00:00Z",
    }
