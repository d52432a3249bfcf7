"""Data structures for the i18n system.

Defines the language cache entry, its state machine and the navigator-like
language preferences consumed by language detection.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

# Translation key -> raw template, one per language tag
Dictionary = Mapping[str, str]

# Variable name -> value supplied by the caller of a translation
Context = Mapping[str, Any]


class CacheState(str, Enum):
    """Loading state of a language dictionary."""

    PENDING = "pending"
    RESOLVED = "resolved"
    REJECTED = "rejected"


@dataclass
class CacheEntry:
    """Loading record for a single canonical language tag.

    Exactly one entry is ever created per tag. The future is shared by every
    caller that asks for the language.

    Attributes:
        lang: Canonical language tag the entry was created for.
        future: Future settled by the loader.
        state: Current CacheState.
        dictionary: The loaded dictionary once state is RESOLVED.
    """

    lang: str
    future: "asyncio.Future[Dictionary]"
    state: CacheState = CacheState.PENDING
    dictionary: Optional[Dictionary] = None

    @property
    def is_settled(self) -> bool:
        return self.state is not CacheState.PENDING


@dataclass(frozen=True)
class LanguagePreferences:
    """Navigator-like language preferences.

    Attributes:
        language: The single preferred language tag.
        languages: Acceptable language tags in preference order.
    """

    language: Optional[str] = None
    languages: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_accept_language(cls, header: Optional[str]) -> "LanguagePreferences":
        """Build preferences from an HTTP Accept-Language header.

        Parses "en-US,en;q=0.9,fr-FR;q=0.8" into tags ordered by quality.
        Wildcards and zero-quality ranges are dropped.

        Args:
            header: Accept-Language header value.

        Returns:
            LanguagePreferences with the best tag as language.
        """
        if not header:
            return cls()

        preferences = []
        for position, part in enumerate(header.split(",")):
            lang_range = part.split(";")[0].strip()
            quality = 1.0

            if ";" in part and "q=" in part:
                try:
                    quality = float(part.split("q=")[1])
                except ValueError:
                    quality = 1.0

            if not lang_range or lang_range == "*" or quality <= 0:
                continue
            preferences.append((lang_range, quality, position))

        ordered = tuple(
            lang
            for lang, _, _ in sorted(preferences, key=lambda x: (-x[1], x[2]))
        )
        return cls(language=ordered[0] if ordered else None, languages=ordered)

    @classmethod
    def coerce(cls, navigator: Any) -> "LanguagePreferences":
        """Accept a LanguagePreferences, a mapping or any object with
        language/languages attributes."""
        if isinstance(navigator, cls):
            return navigator
        if isinstance(navigator, Mapping):
            language = navigator.get("language")
            languages = navigator.get("languages")
        else:
            language = getattr(navigator, "language", None)
            languages = getattr(navigator, "languages", None)
        return cls(language=language, languages=_as_tuple(languages))


def _as_tuple(languages: Optional[Sequence[str]]) -> Tuple[str, ...]:
    if not languages:
        return ()
    if isinstance(languages, str):
        return (languages,)
    return tuple(languages)


def narrow_context(context: Context, names: Sequence[str]) -> Dict[str, Any]:
    """Return a context holding only the named variables that are present."""
    return {name: context[name] for name in names if name in context}
