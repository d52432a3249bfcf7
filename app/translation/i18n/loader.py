"""Translation loading interface and implementations.

Defines the contract for fetching a language's dictionary and provides an
in-memory loader and a JSON/YAML file loader.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from translation.i18n.errors import LoadFailure
from translation.i18n.models import Dictionary
from translation.logging import get_module_logger

logger = get_module_logger()


class TranslationLoader(ABC):
    """Abstract base for translation loaders.

    Implementations define how a language's dictionary is fetched. Failures
    may be raised as any exception; the cache propagates them unchanged.
    """

    @abstractmethod
    async def load(self, lang: str) -> Dictionary:
        """Load the dictionary for a language.

        Args:
            lang: Canonical language tag.

        Returns:
            Mapping of translation key to raw template.
        """
        pass


def flatten_messages(data: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    """Flatten nested namespaces into dot-separated keys.

    {"incident": {"created": "..."}} becomes {"incident.created": "..."}.
    Non-string leaves are converted with str(); None leaves are dropped.

    Args:
        data: Parsed dictionary document.
        prefix: Key prefix for the current nesting level.

    Returns:
        Flat key -> template mapping.
    """
    messages: Dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            messages.update(flatten_messages(value, full_key))
        elif value is not None:
            messages[full_key] = value if isinstance(value, str) else str(value)
    return messages


class StaticTranslationLoader(TranslationLoader):
    """Loader serving dictionaries held in memory.

    Attributes:
        dictionaries: Mapping of language tag to (possibly nested) messages.
    """

    def __init__(self, dictionaries: Optional[Mapping[str, Mapping[str, Any]]] = None):
        self.dictionaries: Dict[str, Mapping[str, Any]] = dict(dictionaries or {})

    async def load(self, lang: str) -> Dictionary:
        """Return the in-memory dictionary for a language.

        Raises:
            LoadFailure: If no dictionary is registered for the language.
        """
        if lang not in self.dictionaries:
            raise LoadFailure(lang, "no dictionary registered")
        return flatten_messages(self.dictionaries[lang])


class FileTranslationLoader(TranslationLoader):
    """Loader for one JSON or YAML file per language.

    Reads <translations_dir>/<lang><extension>. Parsing runs in a worker
    thread so the event loop is never blocked.

    Attributes:
        translations_dir: Directory containing the dictionary files.
        extension: File extension, one of ".json", ".yml", ".yaml".
    """

    def __init__(self, translations_dir: Path, extension: str = ".json"):
        """Initialize file translation loader.

        Args:
            translations_dir: Directory with dictionary files.
            extension: Dictionary file extension.

        Raises:
            ValueError: If the extension is not supported.
        """
        self.translations_dir = Path(translations_dir)
        self.extension = extension if extension.startswith(".") else f".{extension}"

        if self.extension not in (".json", ".yml", ".yaml"):
            raise ValueError(f"Unsupported translation file extension: {extension}")

        logger.info(
            "initialized_file_loader",
            translations_dir=str(self.translations_dir),
            extension=self.extension,
        )

    def path_for(self, lang: str) -> Path:
        return self.translations_dir / f"{lang}{self.extension}"

    async def load(self, lang: str) -> Dictionary:
        """Load a language's dictionary file.

        Raises:
            LoadFailure: If the file is missing, unreadable or not a mapping.
        """
        return await asyncio.to_thread(self._read, lang)

    def _read(self, lang: str) -> Dictionary:
        path = self.path_for(lang)
        if not path.is_file():
            raise LoadFailure(lang, f"file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                if self.extension == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            logger.error("translation_parse_error", file=str(path), error=str(e))
            raise LoadFailure(lang, f"failed to parse {path}: {e}") from e
        except OSError as e:
            raise LoadFailure(lang, f"failed to read {path}: {e}") from e

        if not isinstance(data, Mapping):
            logger.warning("invalid_translation_format", file=str(path), expected="dict")
            raise LoadFailure(lang, f"expected a mapping in {path}")

        messages = flatten_messages(data)
        logger.info("loaded_translation_file", lang=lang, file=str(path), key_count=len(messages))
        return messages
