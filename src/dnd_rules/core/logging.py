"""Structured logging for the D&D 5E character rules engine.

The engine is a library: it only emits events through structlog and never
configures output on import. Host applications call configure_logging()
(or configure_from_settings()) once at startup.

Every engine logger carries a ``component`` field naming the rules module
that emitted it ('health', 'spellcasting', ...), and log_context() binds
character-level fields for the duration of one computation.

Example:
    >>> from dnd_rules.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Spell slot used", spell_level=3, remaining=1)
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from collections.abc import Iterator

    from structlog.types import EventDict, WrappedLogger


ENGINE_NAME = "dnd_rules"


def component_name(name: str | None) -> str | None:
    """Short component name for an engine module ('dnd_rules.engine.health' -> 'health')."""
    if not name or not name.startswith(f"{ENGINE_NAME}."):
        return name
    return name.rsplit(".", 1)[-1]


def add_engine_name(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag entries with the engine name so host applications can filter them."""
    event_dict.setdefault("engine", ENGINE_NAME)
    return event_dict


def configure_logging(*, level: str = "INFO", json_format: bool = False) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Level name; unknown names fall back to INFO.
        json_format: Emit JSON lines instead of console output.
    """
    numeric_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    renderer: Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_engine_name,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(level=numeric_level, stream=sys.stdout, force=True)


def configure_from_settings() -> None:
    """Configure logging from the engine settings."""
    from dnd_rules.core.config import get_settings

    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.json_logs)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger bound to the component it logs for.

    Args:
        name: Module name, typically ``__name__``.
    """
    component = component_name(name)
    if component is None:
        return structlog.get_logger()
    return structlog.get_logger(name, component=component)


@contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """Bind fields to every engine log entry emitted inside the block.

    Example:
        >>> with log_context(classes="Bard 2, Warlock 3"):
        ...     derive_stats(snapshot)
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield


__all__ = [
    "ENGINE_NAME",
    "component_name",
    "add_engine_name",
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "log_context",
]
