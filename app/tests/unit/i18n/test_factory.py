"""Tests for translation.i18n.factory module."""

import pytest

from translation.configuration import Settings, TranslationSettings
from translation.i18n import (
    FileTranslationLoader,
    StaticTranslationLoader,
    TranslationService,
    create_translation_service,
)


def _settings(translations_dir, **overrides):
    values = {
        "TRANSLATION_DEFAULT_LANG": "en",
        "TRANSLATION_PROVIDED_LANGS": ["en", "fr"],
        "TRANSLATION_DIR": str(translations_dir),
        "TRANSLATION_FILE_EXTENSION": ".json",
    }
    values.update(overrides)
    return Settings(translation=TranslationSettings(**values))


class TestCreateTranslationService:
    """Tests for create_translation_service()."""

    def test_uses_file_loader_by_default(self, temp_translations_dir):
        """The factory builds a FileTranslationLoader from settings."""
        service = create_translation_service(_settings(temp_translations_dir))

        assert isinstance(service, TranslationService)
        assert isinstance(service.loader, FileTranslationLoader)
        assert service.loader.translations_dir == temp_translations_dir
        assert service.current_lang() == "en"
        assert service.config.provided_langs == ["en", "fr"]

    def test_custom_loader(self, temp_translations_dir):
        """A given loader is used as is."""
        loader = StaticTranslationLoader({"en": {"A": "a"}})
        service = create_translation_service(_settings(temp_translations_dir), loader=loader)
        assert service.loader is loader

    def test_max_nesting_depth(self, temp_translations_dir):
        """The nesting limit comes from settings."""
        service = create_translation_service(
            _settings(temp_translations_dir, TRANSLATION_MAX_NESTING_DEPTH=4)
        )
        assert service.max_nesting_depth == 4

    @pytest.mark.asyncio
    async def test_translates_from_files(self, temp_translations_dir):
        """A factory-built service translates from dictionary files."""
        service = create_translation_service(
            _settings(temp_translations_dir, TRANSLATION_FILE_EXTENSION=".yml")
        )
        service.use_lang("fr")

        result = await service.translate(
            ["GREETING", "incident.created"],
            {"name": "Jeanne", "incident_id": "INC-1"},
        )

        assert result == ["Bonjour Jeanne", "Incident INC-1 créé"]
