"""Domain value objects."""
from cms_gateway.domain.value_objects.locale import (
    DEFAULT_LOCALE,
    SUPPORTED_LOCALES,
    Locale,
    LocalizedContent,
    is_valid_locale,
)

__all__ = [
    "DEFAULT_LOCALE",
    "SUPPORTED_LOCALES",
    "Locale",
    "LocalizedContent",
    "is_valid_locale",
]
