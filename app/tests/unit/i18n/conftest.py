"""Feature-level fixtures for i18n system tests.

Provides a loader whose futures are settled by hand, sample dictionaries and
a TranslationService wired to both.
"""

import asyncio
import json
from typing import Dict, List, Optional

import pytest
import yaml

from translation.i18n import (
    LoadFailure,
    TranslateConfig,
    TranslationLoader,
    TranslationService,
)


class ManualLoader(TranslationLoader):
    """Loader returning one future per language that the test settles.

    Records every call synchronously so tests can count invocations.
    """

    def __init__(self):
        self.calls: List[str] = []
        self.futures: Dict[str, asyncio.Future] = {}

    def load(self, lang: str) -> asyncio.Future:
        self.calls.append(lang)
        future = self.futures.get(lang)
        if future is None:
            future = asyncio.get_running_loop().create_future()
            self.futures[lang] = future
        return future

    def resolve(self, lang: str, dictionary: Dict[str, str]) -> None:
        self.futures[lang].set_result(dictionary)

    def reject(self, lang: str, error: Optional[Exception] = None) -> None:
        self.futures[lang].set_exception(error or LoadFailure(lang, "unavailable"))


@pytest.fixture
def sample_dictionary():
    """Templates exercising expressions and nested translations."""
    return {
        "TEXT": "This is a text",
        "INTERPOLATION": "The sum from 1+2 is {{1+2}}",
        "VARIABLES_TEST": 'This {{count > 5 ? "is interesting" : "is boring"}}',
        "VARIABLES_OUT": 'Hello {{name.first}} {{name.title ? name.title + " " : ""}}{{name.last}}',
        "BROKEN": 'This "{{notExisting.func()}}" is empty string',
        "SALUTATION": '{{name.title ? name.title + " " : (name.gender === "w" ? "Ms." : "Mr.")}}{{name.first}} {{name.last}}',
        "WELCOME": 'Welcome{{lastLogin ? " back" : ""}} [[SALUTATION:name]]!{{lastLogin ? " Your last login was on " + lastLogin : ""}}',
        "HACK": "{{privateVar}}{{givenVar}}",
        "CALL": "You don't know {{privateVar}} but [[HACK:givenVar]]",
    }


@pytest.fixture
def translate_config():
    """Configuration providing only English."""
    return TranslateConfig(default_lang="en", provided_langs=["en"])


@pytest.fixture
def manual_loader():
    return ManualLoader()


@pytest.fixture
def service(translate_config, manual_loader):
    """TranslationService over the manual loader."""
    return TranslationService(translate_config, manual_loader)


@pytest.fixture
def temp_translations_dir(tmp_path):
    """Create a directory with one dictionary file per language and format.

    Returns a directory structure like:
    - en.json
    - fr.yml
    - broken.json
    - list.yml
    """
    with open(tmp_path / "en.json", "w", encoding="utf-8") as f:
        json.dump(
            {
                "GREETING": "Hello {{name}}",
                "incident": {"created": "Incident {{incident_id}} created"},
            },
            f,
        )

    with open(tmp_path / "fr.yml", "w", encoding="utf-8") as f:
        yaml.dump(
            {
                "GREETING": "Bonjour {{name}}",
                "incident": {"created": "Incident {{incident_id}} créé"},
                "COUNT": 3,
            },
            f,
            allow_unicode=True,
        )

    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")

    with open(tmp_path / "list.yml", "w", encoding="utf-8") as f:
        yaml.dump(["not", "a", "mapping"], f)

    return tmp_path
