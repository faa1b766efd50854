"""Locale value object and localized content mapping."""
from enum import Enum
from typing import Any, Iterator, Mapping, Optional, Union


class Locale(str, Enum):
    """Supported content languages (French is the default)."""

    FR = "fr"
    EN = "en"
    RU = "ru"

    @classmethod
    def parse(cls, value: Union["Locale", str]) -> "Locale":
        """
        Coerce a locale code into a Locale.

        Args:
            value: Locale instance or its code ("fr", "en", "ru")

        Returns:
            Matching Locale

        Raises:
            ValueError: If the code is not a supported locale
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unsupported locale: {value!r}") from None


SUPPORTED_LOCALES = tuple(Locale)
DEFAULT_LOCALE = Locale.FR


def is_valid_locale(value: str) -> bool:
    """Check whether a string is a supported locale code."""
    return value in {locale.value for locale in SUPPORTED_LOCALES}


class LocalizedContent(Mapping):
    """
    Read-only mapping from every supported locale to a string.

    All locales are always present; missing translations are empty strings.
    """

    __slots__ = ("_values",)

    def __init__(self, fr: str = "", en: str = "", ru: str = ""):
        object.__setattr__(self, "_values", {
            Locale.FR: fr or "",
            Locale.EN: en or "",
            Locale.RU: ru or "",
        })

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[Any, Any]]) -> "LocalizedContent":
        """Build from a partial locale-keyed mapping, ignoring unknown keys."""
        values = values or {}
        texts = {}
        for locale in SUPPORTED_LOCALES:
            raw = values.get(locale.value)
            texts[locale.value] = raw if isinstance(raw, str) else ""
        return cls(**texts)

    @classmethod
    def single(cls, text: str, locale: Locale = DEFAULT_LOCALE) -> "LocalizedContent":
        """Assign text to one locale, leaving the others empty."""
        return cls(**{locale.value: text})

    def __getitem__(self, locale: Union[Locale, str]) -> str:
        try:
            return self._values[Locale.parse(locale)]
        except ValueError:
            raise KeyError(locale) from None

    def __contains__(self, locale) -> bool:
        return isinstance(locale, str) and is_valid_locale(str(getattr(locale, "value", locale)))

    def __iter__(self) -> Iterator[Locale]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __setattr__(self, name, value):
        raise AttributeError("LocalizedContent is immutable")

    def __eq__(self, other) -> bool:
        if isinstance(other, LocalizedContent):
            return self._values == other._values
        if isinstance(other, Mapping):
            if len(other) != len(self) or any(key not in self for key in other):
                return False
            return all(self[key] == value for key, value in other.items())
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._values.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{locale.value}={text!r}" for locale, text in self._values.items())
        return f"LocalizedContent({inner})"

    def resolve(self, locale: Union[Locale, str]) -> str:
        """Text for a locale, falling back to the default locale when empty."""
        return self[locale] or self._values[DEFAULT_LOCALE]

    def to_dict(self) -> dict:
        return {locale.value: text for locale, text in self._values.items()}
