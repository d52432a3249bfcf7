"""Language configuration and matching policy.

Decides which language tags are provided and maps requested tags to the
canonical (configured) representation used as the cache key.
"""

import re
from typing import List, Optional, Sequence, Union

from translation.configuration import TranslationSettings

_SEPARATORS = re.compile(r"[^0-9a-z]+")


def normalize_lang(lang: str) -> str:
    """Normalize a language tag for comparison.

    Lower-cases the tag and folds every run of separators into "-", so
    "de/de", "de_DE" and "de-DE" all become "de-de".

    Args:
        lang: Language tag.

    Returns:
        Normalized tag.
    """
    return _SEPARATORS.sub("-", lang.lower()).strip("-")


def primary_subtag(lang: str) -> str:
    """Get the language part of a tag (e.g., "de" from "de-CH")."""
    return normalize_lang(lang).split("-")[0]


class TranslateConfig:
    """Provided languages and the default language.

    Attributes:
        default_lang: Language the service starts with.
        provided_langs: Tags that have a dictionary, in configured form.
    """

    def __init__(
        self,
        default_lang: str = "en",
        provided_langs: Optional[Sequence[str]] = None,
    ):
        self.default_lang = default_lang
        self.provided_langs: List[str] = list(
            provided_langs if provided_langs is not None else ["en"]
        )

    @classmethod
    def from_settings(cls, settings: TranslationSettings) -> "TranslateConfig":
        """Build configuration from translation settings.

        Args:
            settings: TranslationSettings instance.

        Returns:
            TranslateConfig with the configured default and provided tags.
        """
        return cls(
            default_lang=settings.default_lang,
            provided_langs=settings.provided_langs,
        )

    def lang_provided(self, lang: Optional[str], strict: bool = False) -> Union[str, bool]:
        """Check whether a language is provided.

        Strict matching accepts only tags equal to a provided tag after
        normalization. Non-strict matching additionally accepts a tag whose
        language part equals a provided tag (e.g., "de-CH" when "de" is
        provided, but not when only "de-DE" is).

        Args:
            lang: Requested language tag.
            strict: If True, requires a normalized exact match.

        Returns:
            The canonical provided tag, or False if not provided.
        """
        if not lang:
            return False

        normalized = [normalize_lang(provided) for provided in self.provided_langs]

        requested = normalize_lang(lang)
        if requested in normalized:
            return self.provided_langs[normalized.index(requested)]

        if strict:
            return False

        language_only = primary_subtag(lang)
        if language_only in normalized:
            return self.provided_langs[normalized.index(language_only)]

        return False

    def __repr__(self) -> str:
        return (
            f"TranslateConfig(default_lang={self.default_lang!r}, "
            f"provided_langs={self.provided_langs!r})"
        )
