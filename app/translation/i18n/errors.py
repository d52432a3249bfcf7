"""Exception taxonomy for the i18n system."""

from typing import Optional


class TranslationError(Exception):
    """Base class for translation engine errors."""


class LanguageNotProvided(TranslationError):
    """The requested language tag is not accepted by the configuration."""

    def __init__(self, lang: Optional[str] = None):
        super().__init__("Language not provided")
        self.lang = lang


class LoadFailure(TranslationError):
    """A language dictionary could not be read or parsed."""

    def __init__(self, lang: str, reason: str):
        super().__init__(f"Could not load translations for {lang}: {reason}")
        self.lang = lang
        self.reason = reason


class EvaluationError(TranslationError):
    """An embedded expression could not be evaluated."""
