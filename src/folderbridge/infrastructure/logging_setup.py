"""Central logging bootstrap for folderbridge.

Every event carries ``service="folderbridge"``. Tool calls bind their name
and target through ``tool_context`` so nested service logs (file writes,
skipped subtrees) can be traced back to the call that caused them.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from pathlib import PurePath
from typing import Any, Iterator, MutableMapping

import structlog


SERVICE_NAME = "folderbridge"

_LOG_CONFIGURED = False


def _add_service_name(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]):
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _stringify_values(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]):
    """Render filesystem paths and enum members as plain strings."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
        elif isinstance(value, PurePath):
            event_dict[key] = str(value)
    return event_dict


def build_processors(json_logs: bool = False) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _add_service_name,
        _stringify_values,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_logs:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure stdlib logging and structlog once per process."""
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    normalized = str(level or "INFO").upper()
    log_level = getattr(logging, normalized, logging.INFO)

    logging.basicConfig(level=log_level, format="%(message)s")

    structlog.configure(
        processors=build_processors(json_logs),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _LOG_CONFIGURED = True


@contextmanager
def tool_context(tool: str, **fields: Any) -> Iterator[None]:
    """Bind ``tool`` and its target fields to every event logged inside."""
    bound = {key: value for key, value in fields.items() if value is not None}
    with structlog.contextvars.bound_contextvars(tool=tool, **bound):
        yield


__all__ = ["SERVICE_NAME", "build_processors", "configure_logging", "tool_context"]
