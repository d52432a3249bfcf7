"""Runtime translation engine.

Resolves translation keys to interpolated, human-readable messages using
per-language dictionaries that are loaded lazily and at most once.

Subpackages:
- configuration: pydantic settings for the engine
- logging: structlog setup and module loggers
- i18n: language cache, interpolation, expression evaluation and the
  TranslationService facade
"""
