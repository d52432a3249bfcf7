"""Factory functions for creating i18n components.

Wires the configuration, loader and service together from application
settings.
"""

from pathlib import Path
from typing import Optional

from translation.configuration import Settings, settings as default_settings
from translation.i18n.config import TranslateConfig
from translation.i18n.loader import FileTranslationLoader, TranslationLoader
from translation.i18n.service import TranslationService
from translation.logging import get_module_logger

logger = get_module_logger()


def create_translation_service(
    settings: Optional[Settings] = None,
    loader: Optional[TranslationLoader] = None,
) -> TranslationService:
    """Create and configure a TranslationService.

    Args:
        settings: Application settings (default: module-level settings).
        loader: Loader to use (default: FileTranslationLoader over
            settings.translation.translations_dir).

    Returns:
        TranslationService whose current language is the configured default.

    Usage:
        # Use defaults (TRANSLATION_* environment variables)
        service = create_translation_service()

        # Custom loader
        service = create_translation_service(
            loader=StaticTranslationLoader({"en": {"HELLO": "Hello"}})
        )
    """
    translation_settings = (settings or default_settings).translation

    config = TranslateConfig.from_settings(translation_settings)
    if loader is None:
        loader = FileTranslationLoader(
            translations_dir=Path(translation_settings.translations_dir),
            extension=translation_settings.file_extension,
        )

    service = TranslationService(
        config=config,
        loader=loader,
        max_nesting_depth=translation_settings.max_nesting_depth,
    )
    logger.info(
        "translation_service_created",
        default_lang=config.default_lang,
        loader=type(loader).__name__,
    )
    return service
