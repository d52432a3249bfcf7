"""Translation feature settings."""

from typing import Any, List, Optional, Union

from pydantic import Field, field_validator

from translation.configuration.base import FeatureSettings


class TranslationSettings(FeatureSettings):
    """Configuration for languages, dictionaries and interpolation limits.

    Environment Variables:
        TRANSLATION_DEFAULT_LANG: Language used until another one is selected
        TRANSLATION_PROVIDED_LANGS: JSON list or comma-separated provided tags
        TRANSLATION_DIR: Directory holding one dictionary file per language
        TRANSLATION_FILE_EXTENSION: Dictionary file extension (.json, .yml, .yaml)
        TRANSLATION_MAX_NESTING_DEPTH: Maximum depth of nested translations
        TRANSLATION_LOG_LEVEL: Level for the translation loggers, defaults to LOG_LEVEL

    Example:
        ```python
        from translation.configuration import settings

        default = settings.translation.default_lang
        provided = settings.translation.provided_langs
        ```
    """

    default_lang: str = Field(
        default="en",
        alias="TRANSLATION_DEFAULT_LANG",
        description="Language used until another one is selected",
    )
    provided_langs: Union[List[str], str] = Field(
        default_factory=lambda: ["en"],
        alias="TRANSLATION_PROVIDED_LANGS",
        description="Language tags that have a dictionary",
    )
    translations_dir: str = Field(
        default="i18n",
        alias="TRANSLATION_DIR",
        description="Directory holding one dictionary file per language",
    )
    file_extension: str = Field(
        default=".json",
        alias="TRANSLATION_FILE_EXTENSION",
        description="Dictionary file extension: '.json', '.yml' or '.yaml'",
    )
    max_nesting_depth: int = Field(
        default=32,
        alias="TRANSLATION_MAX_NESTING_DEPTH",
        description="Maximum depth of [[KEY:var]] re-entry",
    )
    log_level: Optional[str] = Field(
        default=None,
        alias="TRANSLATION_LOG_LEVEL",
        description="Level for the translation loggers, defaults to LOG_LEVEL",
    )

    @field_validator("provided_langs", mode="before")
    @classmethod
    def _parse_provided_langs(cls, v: Any) -> Any:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @field_validator("file_extension")
    @classmethod
    def _validate_extension(cls, v: str) -> str:
        ext = v if v.startswith(".") else f".{v}"
        if ext.lower() not in (".json", ".yml", ".yaml"):
            raise ValueError(f"Unsupported translation file extension: {v}")
        return ext.lower()
