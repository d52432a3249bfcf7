"""Tests for translation.i18n.cache module."""

import asyncio
from unittest.mock import MagicMock

import pytest

from translation.i18n import LanguageCache, LoadFailure, StaticTranslationLoader
from translation.i18n.models import CacheState


class TestLanguageCache:
    """Tests for LanguageCache."""

    @pytest.mark.asyncio
    async def test_ensure_loaded_invokes_loader(self, manual_loader):
        """ensure_loaded() starts loading an unseen language."""
        cache = LanguageCache(manual_loader)

        cache.ensure_loaded("en")

        assert manual_loader.calls == ["en"]
        assert cache.state("en") is CacheState.PENDING

    @pytest.mark.asyncio
    async def test_loader_invoked_once(self, manual_loader):
        """Repeated requests share one load and one future."""
        cache = LanguageCache(manual_loader)

        first = cache.ensure_loaded("en")
        second = cache.ensure_loaded("en")

        assert first is second
        assert manual_loader.calls == ["en"]
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_resolved_future_reused(self, manual_loader):
        """A resolved language returns the same future without reloading."""
        cache = LanguageCache(manual_loader)
        first = cache.ensure_loaded("en")
        manual_loader.resolve("en", {"TEXT": "This is a text"})
        await first

        second = cache.ensure_loaded("en")

        assert second is first
        assert second.done()
        assert manual_loader.calls == ["en"]

    @pytest.mark.asyncio
    async def test_resolve_stores_dictionary(self, manual_loader):
        """A resolved load makes the dictionary available."""
        cache = LanguageCache(manual_loader)
        future = cache.ensure_loaded("en")

        manual_loader.resolve("en", {"TEXT": "This is a text"})
        result = await future

        assert result == {"TEXT": "This is a text"}
        assert cache.state("en") is CacheState.RESOLVED
        assert cache.get("en")["TEXT"] == "This is a text"

    @pytest.mark.asyncio
    async def test_state_current_before_callbacks_run(self, manual_loader):
        """get() reflects a settled future even before its callbacks ran."""
        cache = LanguageCache(manual_loader)
        cache.ensure_loaded("en")

        manual_loader.resolve("en", {"TEXT": "text"})

        assert cache.get("en") == {"TEXT": "text"}

    @pytest.mark.asyncio
    async def test_dictionary_is_read_only(self, manual_loader):
        """The stored dictionary cannot be patched."""
        cache = LanguageCache(manual_loader)
        future = cache.ensure_loaded("en")
        manual_loader.resolve("en", {"TEXT": "text"})
        await future

        with pytest.raises(TypeError):
            cache.get("en")["TEXT"] = "changed"

    @pytest.mark.asyncio
    async def test_reject_propagates_reason(self, manual_loader):
        """A failed load rejects with the loader's exception unchanged."""
        cache = LanguageCache(manual_loader)
        future = cache.ensure_loaded("en")
        error = ConnectionError("network down")

        manual_loader.reject("en", error)

        with pytest.raises(ConnectionError) as exc_info:
            await future
        assert exc_info.value is error
        assert cache.state("en") is CacheState.REJECTED
        assert cache.get("en") is None

    @pytest.mark.asyncio
    async def test_rejected_not_retried(self, manual_loader):
        """A rejected language is never loaded again."""
        cache = LanguageCache(manual_loader)
        first = cache.ensure_loaded("en")
        manual_loader.reject("en")
        with pytest.raises(LoadFailure):
            await first

        second = cache.ensure_loaded("en")

        assert second is first
        assert manual_loader.calls == ["en"]

    @pytest.mark.asyncio
    async def test_concurrent_waiters_share_outcome(self, manual_loader):
        """Concurrent waiters all observe the single load."""
        cache = LanguageCache(manual_loader)

        async def waiter():
            return await cache.ensure_loaded("de")

        tasks = [asyncio.create_task(waiter()) for _ in range(5)]
        await asyncio.sleep(0)
        manual_loader.resolve("de", {"TEXT": "Ein Text"})
        results = await asyncio.gather(*tasks)

        assert all(result == {"TEXT": "Ein Text"} for result in results)
        assert manual_loader.calls == ["de"]

    @pytest.mark.asyncio
    async def test_languages_cached_independently(self, manual_loader):
        """Each language tag has its own entry."""
        cache = LanguageCache(manual_loader)

        cache.ensure_loaded("en")
        cache.ensure_loaded("de")

        assert manual_loader.calls == ["en", "de"]
        assert "en" in cache
        assert "de" in cache
        assert "fr" not in cache

    @pytest.mark.asyncio
    async def test_loaded_langs(self, manual_loader):
        """loaded_langs() lists only resolved languages."""
        cache = LanguageCache(manual_loader)
        cache.ensure_loaded("en")
        cache.ensure_loaded("de")
        cache.ensure_loaded("fr")
        manual_loader.resolve("en", {})
        manual_loader.reject("de")

        assert cache.loaded_langs() == ["en"]
        manual_loader.resolve("fr", {})
        assert cache.loaded_langs() == ["en", "fr"]
        await asyncio.gather(*manual_loader.futures.values(), return_exceptions=True)

    @pytest.mark.asyncio
    async def test_coroutine_loader(self):
        """Coroutine loaders are scheduled as tasks."""
        cache = LanguageCache(StaticTranslationLoader({"en": {"A": "a"}}))

        result = await cache.ensure_loaded("en")

        assert result == {"A": "a"}
        assert cache.get("en") == {"A": "a"}

    @pytest.mark.asyncio
    async def test_loader_raising_synchronously_rejects(self):
        """A loader failing before returning an awaitable rejects the future."""
        loader = MagicMock()
        loader.load.side_effect = RuntimeError("misconfigured")
        cache = LanguageCache(loader)

        future = cache.ensure_loaded("en")

        with pytest.raises(RuntimeError):
            await future
        assert cache.state("en") is CacheState.REJECTED
        assert loader.load.call_count == 1

    @pytest.mark.asyncio
    async def test_non_string_values_stored_as_text(self, manual_loader):
        """Loader values are stored as string templates."""
        cache = LanguageCache(manual_loader)
        future = cache.ensure_loaded("en")
        manual_loader.resolve("en", {"N": 5, "T": "ok", "NONE": None, "ns": {"K": "v"}})
        await future

        assert cache.get("en") == {"N": "5", "T": "ok", "ns.K": "v"}

    @pytest.mark.asyncio
    async def test_non_mapping_result_rejected_state(self, manual_loader):
        """A loader resolving with something other than a mapping is not usable."""
        cache = LanguageCache(manual_loader)
        future = cache.ensure_loaded("en")
        manual_loader.resolve("en", ["not", "a", "dict"])
        await future

        assert cache.state("en") is CacheState.REJECTED
        assert cache.get("en") is None

    def test_unknown_language_state(self, manual_loader):
        """state() and get() return None for languages never requested."""
        cache = LanguageCache(manual_loader)
        assert cache.state("en") is None
        assert cache.get("en") is None
