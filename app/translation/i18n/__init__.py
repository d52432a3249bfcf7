"""i18n system - runtime translation of message templates.

Provides per-language dictionary caching, template interpolation with
embedded expressions, nested translations and language selection.

Main components:
- models: CacheEntry, CacheState, LanguagePreferences
- errors: LanguageNotProvided, LoadFailure, EvaluationError
- expressions: evaluator for {{ ... }} expressions
- interpolator: marker substitution for {{ ... }} and [[ KEY:var ]]
- cache: LanguageCache with at-most-once loading per language
- config: TranslateConfig language matching policy
- loader: TranslationLoader, StaticTranslationLoader, FileTranslationLoader
- service: TranslationService facade
"""

from translation.i18n.cache import LanguageCache
from translation.i18n.config import TranslateConfig, normalize_lang
from translation.i18n.errors import (
    EvaluationError,
    LanguageNotProvided,
    LoadFailure,
    TranslationError,
)
from translation.i18n.expressions import evaluate
from translation.i18n.factory import create_translation_service
from translation.i18n.interpolator import interpolate
from translation.i18n.loader import (
    FileTranslationLoader,
    StaticTranslationLoader,
    TranslationLoader,
)
from translation.i18n.models import CacheEntry, CacheState, LanguagePreferences
from translation.i18n.service import TranslationService

__all__ = [
    "CacheEntry",
    "CacheState",
    "LanguagePreferences",
    "TranslationError",
    "LanguageNotProvided",
    "LoadFailure",
    "EvaluationError",
    "evaluate",
    "interpolate",
    "LanguageCache",
    "TranslateConfig",
    "normalize_lang",
    "TranslationLoader",
    "StaticTranslationLoader",
    "FileTranslationLoader",
    "TranslationService",
    "create_translation_service",
]
