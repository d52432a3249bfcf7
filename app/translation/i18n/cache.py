"""Language cache.

Owns the loading state of every language dictionary. The loader is invoked
at most once per canonical language tag for the lifetime of the cache; every
later request for the tag gets the same future, whether it is still pending,
resolved or rejected. Entries are never evicted or refreshed.
"""

import asyncio
from functools import partial
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from translation.i18n.loader import TranslationLoader, flatten_messages
from translation.i18n.models import CacheEntry, CacheState, Dictionary
from translation.logging import get_module_logger

logger = get_module_logger()


class LanguageCache:
    """Per-language dictionary cache with at-most-once loading.

    Must be used from within a running event loop. The check for an existing
    entry and the creation of a new one happen without suspending, so
    concurrent callers on the same loop never start a second load.

    Attributes:
        loader: TranslationLoader invoked for languages not seen before.
    """

    def __init__(self, loader: TranslationLoader):
        self.loader = loader
        self._entries: Dict[str, CacheEntry] = {}

    def ensure_loaded(self, lang: str) -> "asyncio.Future[Dictionary]":
        """Return the future for a language, starting its load if needed.

        Args:
            lang: Canonical language tag.

        Returns:
            Future settled with the language's dictionary or the loader's
            exception, unchanged.
        """
        entry = self._entries.get(lang)
        if entry is not None:
            return entry.future

        try:
            future = asyncio.ensure_future(self.loader.load(lang))
        except Exception as e:
            # A loader failing before returning an awaitable rejects the same way
            future = asyncio.get_running_loop().create_future()
            future.set_exception(e)

        entry = CacheEntry(lang=lang, future=future)
        self._entries[lang] = entry
        future.add_done_callback(partial(self._settle, entry))
        logger.info("language_load_started", lang=lang)
        return future

    def _settle(self, entry: CacheEntry, *_: object) -> None:
        """Record the outcome of a settled load. Safe to call repeatedly."""
        future = entry.future
        if entry.is_settled or not future.done():
            return

        if future.cancelled():
            entry.state = CacheState.REJECTED
            logger.warning("language_load_cancelled", lang=entry.lang)
            return

        error = future.exception()
        if error is not None:
            entry.state = CacheState.REJECTED
            logger.warning(
                "language_load_failed",
                lang=entry.lang,
                error=str(error),
                error_type=type(error).__name__,
            )
            return

        result = future.result()
        if not isinstance(result, Mapping):
            entry.state = CacheState.REJECTED
            logger.error(
                "invalid_dictionary_type",
                lang=entry.lang,
                received=type(result).__name__,
            )
            return

        # Nested namespaces flattened, non-string leaves stringified
        entry.dictionary = MappingProxyType(flatten_messages(result))
        entry.state = CacheState.RESOLVED
        logger.info("language_loaded", lang=entry.lang, key_count=len(entry.dictionary))

    def get(self, lang: str) -> Optional[Dictionary]:
        """Get the dictionary for a language if it has finished loading.

        Args:
            lang: Canonical language tag.

        Returns:
            Read-only dictionary, or None if not requested, pending or failed.
        """
        entry = self.entry(lang)
        if entry is None or entry.state is not CacheState.RESOLVED:
            return None
        return entry.dictionary

    def entry(self, lang: str) -> Optional[CacheEntry]:
        """Get the entry for a language with its state brought up to date."""
        entry = self._entries.get(lang)
        if entry is not None:
            self._settle(entry)
        return entry

    def state(self, lang: str) -> Optional[CacheState]:
        entry = self.entry(lang)
        return entry.state if entry else None

    def loaded_langs(self) -> List[str]:
        """List languages whose dictionary resolved, in request order."""
        return [lang for lang in self._entries if self.state(lang) is CacheState.RESOLVED]

    def __contains__(self, lang: object) -> bool:
        return lang in self._entries

    def __len__(self) -> int:
        return len(self._entries)
