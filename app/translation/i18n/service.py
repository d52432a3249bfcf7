"""Translation service facade.

Tracks the current language, detects and selects languages and resolves
translation keys synchronously (instant) or after the language's dictionary
has loaded (translate).
"""

import asyncio
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from translation.i18n.cache import LanguageCache
from translation.i18n.config import TranslateConfig
from translation.i18n.errors import LanguageNotProvided
from translation.i18n.interpolator import interpolate
from translation.i18n.loader import TranslationLoader
from translation.i18n.models import Context, Dictionary, LanguagePreferences
from translation.logging import get_module_logger

logger = get_module_logger()

Keys = Union[str, Sequence[str]]
Translated = Union[str, List[str], Tuple[str, ...]]


def _mark_retrieved(future: "asyncio.Future[Dictionary]") -> None:
    # Callers may drop a rejection they do not need
    future.exception()


class TranslationService:
    """Translate keys into interpolated messages for the current language.

    Usage:
        config = TranslateConfig(default_lang="en", provided_langs=["en", "de"])
        service = TranslationService(config, FileTranslationLoader(Path("i18n")))

        service.use_lang("de")
        text = await service.translate("WELCOME", {"name": {"first": "Jane"}})

        # Once the language is loaded
        text = service.instant("WELCOME", {"name": {"first": "Jane"}})

    Attributes:
        config: TranslateConfig deciding which languages are provided.
        loader: TranslationLoader used by the cache.
        cache: LanguageCache holding every requested language.
        max_nesting_depth: Limit for [[KEY:var]] re-entry.
    """

    def __init__(
        self,
        config: TranslateConfig,
        loader: TranslationLoader,
        max_nesting_depth: int = 32,
    ):
        self.config = config
        self.loader = loader
        self.cache = LanguageCache(loader)
        self.max_nesting_depth = max_nesting_depth
        self._current_lang = config.default_lang
        logger.info(
            "initialized_translation_service",
            default_lang=config.default_lang,
            provided_langs=config.provided_langs,
        )

    def current_lang(self) -> str:
        """Get the language currently in use."""
        return self._current_lang

    def detect_lang(self, navigator: Any) -> Union[str, bool]:
        """Detect the preferred provided language of a client.

        The single preferred language is checked first, then the ordered
        list of acceptable languages. Matching is non-strict.

        Args:
            navigator: LanguagePreferences, a mapping or any object with
                ``language`` and optional ``languages``.

        Returns:
            Canonical tag of the first provided language, or False.
        """
        preferences = LanguagePreferences.coerce(navigator)

        detected: Union[str, bool] = False
        if preferences.language:
            detected = self.config.lang_provided(preferences.language)

        if not detected:
            for lang in preferences.languages:
                detected = self.config.lang_provided(lang)
                if detected:
                    break

        logger.debug(
            "detected_language",
            language=preferences.language,
            languages=list(preferences.languages),
            detected=detected,
        )
        return detected

    def use_lang(self, lang: str) -> Union[str, bool]:
        """Select the current language.

        Args:
            lang: Requested language tag, matched strictly.

        Returns:
            The canonical tag now in use, or False if the language is not
            provided (the current language is left unchanged).
        """
        provided = self.config.lang_provided(lang, True)
        if not provided:
            logger.warning("language_not_provided", lang=lang)
            return False

        self._current_lang = provided
        logger.info("language_selected", lang=provided)
        return provided

    def wait_for_translation(self, lang: Optional[str] = None) -> "asyncio.Future[Dictionary]":
        """Get the future for a language's dictionary, loading it if needed.

        Must be called from a running event loop. The current language was
        validated when selected, so only an explicit lang is checked.

        Args:
            lang: Language tag, defaults to the current language.

        Returns:
            Future resolved with the dictionary. Rejected with
            LanguageNotProvided if lang is not provided, or with the loader's
            exception if loading fails. Repeated calls for a language return
            the same future.
        """
        if lang is None:
            return self.cache.ensure_loaded(self._current_lang)

        provided = self.config.lang_provided(lang, True)
        if not provided:
            logger.warning("language_not_provided", lang=lang)
            rejected = asyncio.get_running_loop().create_future()
            rejected.set_exception(LanguageNotProvided(lang))
            rejected.add_done_callback(_mark_retrieved)
            return rejected

        return self.cache.ensure_loaded(provided)

    def instant(
        self,
        keys: Keys,
        context: Optional[Context] = None,
        lang: Optional[str] = None,
    ) -> Translated:
        """Translate synchronously with whatever is already loaded.

        Args:
            keys: A key or an ordered collection of keys.
            context: Variables visible to the templates' expressions.
            lang: Language tag, defaults to the current language.

        Returns:
            A string for a single key, otherwise a collection of the same
            shape. Keys are returned unchanged when the language is not
            loaded or the key has no translation.
        """
        context = context if context is not None else {}
        dictionary = self.cache.get(self._resolve_lang(lang))

        if dictionary is None:
            return self._untranslated(keys)

        if isinstance(keys, str):
            return self._translate_key(keys, context, dictionary)

        translated = [self._translate_key(key, context, dictionary) for key in keys]
        return tuple(translated) if isinstance(keys, tuple) else translated

    async def translate(
        self,
        keys: Keys,
        context: Optional[Context] = None,
        lang: Optional[str] = None,
    ) -> Translated:
        """Translate once the language's dictionary is available.

        Never raises for a missing or failing language; the keys are
        returned unchanged instead.

        Args:
            keys: A key or an ordered collection of keys.
            context: Variables visible to the templates' expressions.
            lang: Language tag, defaults to the current language.

        Returns:
            Same shape as instant().
        """
        context = context if context is not None else {}
        target = self._current_lang if lang is None else lang

        try:
            await asyncio.shield(self.wait_for_translation(lang))
        except Exception as e:
            logger.info(
                "translation_fell_back_to_keys",
                lang=target,
                reason=str(e),
                error_type=type(e).__name__,
            )
            return self._untranslated(keys)

        return self.instant(keys, context, target)

    def has_translation(self, key: str, lang: Optional[str] = None) -> bool:
        """Check if a loaded language has a template for a key."""
        dictionary = self.cache.get(self._resolve_lang(lang))
        return dictionary is not None and key in dictionary

    def loaded_langs(self) -> List[str]:
        """List canonical tags whose dictionaries have loaded."""
        return self.cache.loaded_langs()

    def _resolve_lang(self, lang: Optional[str]) -> str:
        if lang is None:
            return self._current_lang
        if lang in self.cache:
            return lang
        return self.config.lang_provided(lang, True) or lang

    def _translate_key(
        self,
        key: str,
        context: Context,
        dictionary: Dictionary,
        expanding: FrozenSet[str] = frozenset(),
    ) -> str:
        template = dictionary.get(key)
        if template is None:
            return key

        # Keys on the current [[...]] chain, this one included
        expanding = expanding | {key}
        depth = len(expanding) - 1

        def resolve_nested(nested_key: str, nested_context: Dict[str, Any]) -> str:
            if nested_key in expanding:
                logger.warning("nested_translation_cycle", key=nested_key, depth=depth)
                return nested_key
            if depth >= self.max_nesting_depth:
                logger.warning(
                    "nested_translation_depth_exceeded",
                    key=nested_key,
                    depth=depth,
                )
                return nested_key
            return self._translate_key(nested_key, nested_context, dictionary, expanding)

        return interpolate(template, context, resolve_nested)

    @staticmethod
    def _untranslated(keys: Keys) -> Translated:
        if isinstance(keys, str):
            return keys
        if isinstance(keys, tuple):
            return keys
        return list(keys)
