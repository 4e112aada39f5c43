# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
EditionForge — Structured Logging
JSON-formatted logs via structlog. Every batch log entry carries the
edition it concerns, and the chunk index while a chunk is rendering.
"""

import logging
import sys
from pathlib import PurePath
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from editionforge.config import Settings, get_settings


def _add_app_info(
    logger: Any, method: str, event_dict: EventDict
) -> EventDict:
    event_dict["app"] = "editionforge"
    return event_dict


def _stringify_paths(
    logger: Any, method: str, event_dict: EventDict
) -> EventDict:
    """Paths (build dirs, element files) render as plain strings in JSON."""
    for key, value in event_dict.items():
        if isinstance(value, PurePath):
            event_dict[key] = str(value)
    return event_dict


def _renderers(debug: bool) -> list[Processor]:
    if debug:
        # Readable output while tuning a layer configuration
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(
    settings: Settings | None = None, level: str | None = None
) -> None:
    """
    Configure structlog once per console script run.
    level overrides settings.log_level; DEBUG switches to console output.
    """
    level_name = (level or (settings or get_settings()).log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_app_info,
        _stringify_paths,
        *_renderers(level_name == "DEBUG"),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=True,
    )

    # PIL plugins log through stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)


def get_logger(name: str = "editionforge") -> structlog.BoundLogger:
    """
    Return a structlog bound logger.

        log = get_logger(__name__)
        log.info("created_edition", edition=42)

    The batch driver binds the chunk index for every record rendered in it:
        structlog.contextvars.bind_contextvars(chunk=3)
        ...
        structlog.contextvars.unbind_contextvars("chunk")
    """
    return structlog.get_logger(name)
