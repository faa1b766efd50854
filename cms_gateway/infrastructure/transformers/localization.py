"""Normalization helpers shared by the backend transformers."""
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Type, TypeVar

from cms_gateway.domain.entities.product import ProductCategory
from cms_gateway.domain.value_objects.locale import (
    DEFAULT_LOCALE,
    SUPPORTED_LOCALES,
    LocalizedContent,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

PLACEHOLDER_IMAGE_URL = "/images/placeholder-product.svg"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class UnknownCategoryError(ValueError):
    """A product record names a category outside the catalogue."""


class LocaleShape(Enum):
    """How a backend record stores one localized field."""

    OBJECT = "object"            # {"name": {"fr": ..., "en": ...}}
    SUFFIXED = "suffixed"        # {"name_fr": ..., "name_en": ...}
    BARE_STRING = "bare_string"  # {"name": "..."} (legacy records)
    ABSENT = "absent"


def detect_locale_shape(record: Optional[Mapping[str, Any]], field: str) -> LocaleShape:
    """
    Detect how ``field`` is localized in ``record``.

    An explicit value under ``field`` takes precedence over suffixed
    siblings.
    """
    if not record:
        return LocaleShape.ABSENT
    value = record.get(field)
    if isinstance(value, Mapping):
        return LocaleShape.OBJECT
    if isinstance(value, str):
        return LocaleShape.BARE_STRING
    if any(f"{field}_{locale.value}" in record for locale in SUPPORTED_LOCALES):
        return LocaleShape.SUFFIXED
    return LocaleShape.ABSENT


def localized_field(record: Optional[Mapping[str, Any]], field: str) -> LocalizedContent:
    """
    Read ``field`` from ``record`` as complete LocalizedContent.

    A bare string belongs to the default locale only; other locales stay
    empty rather than guessed.
    """
    shape = detect_locale_shape(record, field)
    if shape is LocaleShape.OBJECT:
        return LocalizedContent.from_mapping(record[field])
    if shape is LocaleShape.SUFFIXED:
        return LocalizedContent.from_mapping({
            locale.value: record.get(f"{field}_{locale.value}") for locale in SUPPORTED_LOCALES
        })
    if shape is LocaleShape.BARE_STRING:
        return LocalizedContent.single(record[field], DEFAULT_LOCALE)
    if shape is LocaleShape.ABSENT:
        return LocalizedContent()
    raise ValueError(f"Unhandled locale shape: {shape}")


def first_text(content: LocalizedContent) -> str:
    """Default-locale text, or the first non-empty translation."""
    if content[DEFAULT_LOCALE]:
        return content[DEFAULT_LOCALE]
    return next((text for text in content.values() if text), "")


def parse_datetime(value: Any, default: Optional[datetime] = EPOCH) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp (``Z`` suffix accepted); missing values give ``default``."""
    if isinstance(value, datetime):
        return value
    if not value:
        return default
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def as_str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def as_int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    return int(value)


def as_float(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    return float(value)


def known_values(values: Iterable[Any], enum_type: Type[E], label: str) -> tuple:
    """Keep values from a closed vocabulary, dropping (and logging) unknown ones."""
    result = []
    for value in values:
        try:
            member = enum_type(value)
        except ValueError:
            logger.warning(f"Dropping unknown {label}: {value!r}")
            continue
        if member not in result:
            result.append(member)
    return tuple(result)


def product_category(value: Any) -> ProductCategory:
    """
    Parse a product category.

    Raises:
        UnknownCategoryError: If the category is not in the catalogue
    """
    try:
        return ProductCategory(value)
    except ValueError:
        raise UnknownCategoryError(f"Unknown product category: {value!r}") from None
