"""Raw backend payload -> domain entity transformers."""
from cms_gateway.infrastructure.transformers.images import SanityImageBuilder, StrapiImageBuilder
from cms_gateway.infrastructure.transformers.localization import (
    PLACEHOLDER_IMAGE_URL,
    LocaleShape,
    detect_locale_shape,
    localized_field,
)
from cms_gateway.infrastructure.transformers.sanity_transformer import SanityTransformer
from cms_gateway.infrastructure.transformers.strapi_transformer import StrapiTransformer

__all__ = [
    "PLACEHOLDER_IMAGE_URL",
    "LocaleShape",
    "SanityImageBuilder",
    "SanityTransformer",
    "StrapiImageBuilder",
    "StrapiTransformer",
    "detect_locale_shape",
    "localized_field",
]
