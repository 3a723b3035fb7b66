"""
Structured logging for Stockbook.

All modules log through structlog with snake_case event names and
key/value context. Output is a console renderer or JSON lines, chosen by
``Settings.log_format`` ("auto" picks the console in development).
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor

from stockbook.config.settings import Settings, get_settings

# Context keys that identify the stock record an event is about
LEDGER_KEYS = ("material_id", "sku", "movement_id", "sale_id")


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Stamp every event with the service name and environment."""
    settings = get_settings()
    event_dict.setdefault("app", settings.app_name)
    event_dict.setdefault("env", settings.environment)
    return event_dict


def tag_ledger_events(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mark events that reference a material, movement or sale."""
    if any(key in event_dict for key in LEDGER_KEYS):
        event_dict["domain"] = "ledger"
    return event_dict


def _use_json(settings: Settings) -> bool:
    if settings.log_format == "auto":
        return settings.environment != "development"
    return settings.log_format == "json"


def _build_processors(json_output: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
        tag_ledger_events,
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(level: str | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Override for ``Settings.log_level`` (e.g. from a CLI flag).
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    structlog.configure(
        processors=_build_processors(_use_json(settings)),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level, force=True)

    for noisy in ("aiosqlite", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
