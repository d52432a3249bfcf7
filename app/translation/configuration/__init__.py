"""Configuration module - public API.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    TranslationSettings: Translation feature settings class

Example:
    ```python
    from translation.configuration import settings

    provided = settings.translation.provided_langs
    ```
"""

from translation.configuration.settings import Settings, settings
from translation.configuration.translation import TranslationSettings

__all__ = ["Settings", "TranslationSettings", "settings"]
