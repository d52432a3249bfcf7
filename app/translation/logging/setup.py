"""Structlog setup for the translation engine.

Events go through stdlib loggers under the ``translation`` namespace. Only
that namespace gets a level and a handler, so an embedding application keeps
its own root logger configuration.

Usage:
    from translation.logging import configure_logging, get_module_logger

    configure_logging(log_level="DEBUG")

    logger = get_module_logger()
    logger.info("language_loaded", lang="en")
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger

from translation.configuration import settings

LOGGER_NAMESPACE = "translation"
SILENT = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def _resolve_level(log_level: Optional[str]) -> int:
    """Pick the level: explicit value, TRANSLATION_LOG_LEVEL, then LOG_LEVEL."""
    name = log_level or settings.translation.log_level or settings.LOG_LEVEL
    return getattr(logging, name.upper(), logging.INFO)


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> logging.Logger:
    """Configure structlog and the ``translation`` logger namespace.

    Args:
        log_level: Optional level override (DEBUG, INFO, WARNING, ...).
        is_production: Optional override for JSON (production) vs console
            rendering. Defaults to settings.is_production.

    Returns:
        The stdlib logger at the top of the namespace.
    """
    prod_mode = is_production if is_production is not None else settings.is_production
    renderer = (
        structlog.processors.JSONRenderer()
        if prod_mode
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    namespace = logging.getLogger(LOGGER_NAMESPACE)
    if _is_test_environment():
        namespace.setLevel(SILENT)
        return namespace

    namespace.setLevel(_resolve_level(log_level))
    if not namespace.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        namespace.addHandler(handler)
        namespace.propagate = False
    return namespace


configure_logging()


def get_module_logger(name: Optional[str] = None) -> BoundLogger:
    """Get a logger named after the calling module.

    Args:
        name: Module name, defaults to the caller's ``__name__``.

    Returns:
        Logger bound with the module's last name part as ``component``,
        e.g. "cache" for translation.i18n.cache.
    """
    if name is None:
        caller = sys._getframe(1)  # pylint: disable=protected-access
        name = caller.f_globals.get("__name__", LOGGER_NAMESPACE)
    return structlog.stdlib.get_logger(name).bind(component=name.rpartition(".")[2])
