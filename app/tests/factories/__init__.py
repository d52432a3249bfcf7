"""Test data factories for deterministic test data generation."""

from tests.factories.i18n import (
    make_language_preferences,
    make_static_service,
    make_translate_config,
)

__all__ = [
    "make_language_preferences",
    "make_static_service",
    "make_translate_config",
]
