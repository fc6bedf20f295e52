"""Structured logging for the continuity engine.

The engine logs projections, rule evaluation and snapshot arena
maintenance through structlog. Events carry the unit id they concern;
world-state snapshots passed as event fields are reduced to a fact count
so a single check never dumps a whole timeline into the log.

Example:
    >>> from continuity_engine.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Projected unit", unit_id="scene-3", deltas=4)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


APP_NAME = "continuity_engine"

# Event fields that hold world-state snapshots
STATE_FIELDS = ("state", "pre_state", "post_state")

_STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every event with the engine name."""
    event_dict["app"] = APP_NAME
    return event_dict


def _count_facts(state: Mapping[str, Any]) -> int:
    count = 0
    for value in state.values():
        if isinstance(value, Mapping) and value:
            count += _count_facts(value)
        else:
            count += 1
    return count


def summarize_world_states(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Replace snapshot fields with the number of facts they hold.

    A field listed in ``STATE_FIELDS`` whose value is a mapping becomes
    ``<name>_facts`` with its leaf count. Other values pass through.
    """
    for field in STATE_FIELDS:
        value = event_dict.get(field)
        if isinstance(value, Mapping):
            del event_dict[field]
            event_dict[f"{field}_facts"] = _count_facts(value)
    return event_dict


def _build_processors(json_format: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        summarize_world_states,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_format:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return processors


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure engine logging.

    Engine events go through structlog. Standard-library logging is
    routed to stdout at the same level, and optionally to ``log_file``.

    Args:
        level: DEBUG shows every projection and rule pass; INFO shows
            arena rebuilds, disabled rules and checks that found issues.
        json_format: Render events as JSON lines.
        log_file: Optional path for a persistent stdlib log.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=_build_processors(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format=_STDLIB_FORMAT,
        level=log_level,
        stream=sys.stdout,
        force=True,
    )

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(_STDLIB_FORMAT))
        logging.getLogger().addHandler(file_handler)


def configure_from_settings(settings: Any) -> None:
    """Configure logging from a Settings instance.

    Args:
        settings: Object exposing log_level, json_logs and log_file.
    """
    configure_logging(
        level=settings.log_level,
        json_format=settings.json_logs,
        log_file=str(settings.log_file) if settings.log_file else None,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind fields to every later event in the current context.

    Example:
        >>> bind_context(project_id="p-42", timeline="main")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "summarize_world_states",
]
