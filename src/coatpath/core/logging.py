"""
Structured logging configuration for coatpath.

Uses structlog (https://www.structlog.org/) so planners can emit event-style
records with context (shape name, segment counts, chosen pattern). Supports
JSON output for batch runs and colored console output for development.

Usage::

    from coatpath.core.logging import configure_logging, get_logger

    configure_logging(json_output=False)  # Call once at startup
    logger = get_logger(__name__)
    logger.info("fill_planned", pattern="horizontal", segments=42)
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, MutableMapping, Optional

import structlog

# Decimal places kept for float fields (mm, seconds) in log records.
LOG_FLOAT_PRECISION = 3

# Per-shape planning events (fill_planned, mask_density_sampled, ...).
PLANNER_LOGGER = "coatpath.planning"


def round_floats(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Round float fields so coordinates and timings stay readable."""
    for key, value in event_dict.items():
        if isinstance(value, float):
            event_dict[key] = round(value, LOG_FLOAT_PRECISION)
    return event_dict


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def _formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        tail = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        tail = [structlog.dev.ConsoleRenderer()]
    return structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *tail],
    )


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
    planner_level: Optional[str] = None,
) -> None:
    """
    Configure structured logging for coatpath.

    Call this once at startup (the CLI does it before planning).

    Args:
        level: Minimum log level for job and CLI records.
        json_output: Render stderr records as JSON lines instead of colored
                     console lines.
        log_file: Optional file that receives every record as JSON lines,
                  whatever ``json_output`` says.
        planner_level: Minimum level for ``coatpath.planning``. Defaults to
                       ``level`` but never below INFO.
    """
    log_level = _level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_formatter(json_output))
    handlers: list[logging.Handler] = [console]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(_formatter(json_output=True))
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)
    logging.getLogger(PLANNER_LOGGER).setLevel(
        _level(planner_level) if planner_level else max(log_level, logging.INFO)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            round_floats,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Module logger; ``coatpath.planning.*`` names follow ``planner_level``."""
    return structlog.get_logger(name)


@contextmanager
def shape_context(name: str, coating_type: str) -> Iterator[None]:
    """Bind the shape being planned to every record emitted inside the block."""
    with structlog.contextvars.bound_contextvars(shape=name, coating=coating_type):
        yield
