"""
Structured logging with structlog.

Log lines are event names plus key/value context ("booking_created",
booking_id=..., activity_id=...). Request-scoped values such as the request
ID are bound by RequestLoggingMiddleware through contextvars and merged into
every line emitted while the request is handled, including service and store
logs.

LOG_FORMAT selects the renderer: "json" for machine-parseable output,
"console" for a colored development view. Left unset, production renders
JSON and every other environment renders to the console.
"""

import logging
import sys
from typing import Optional

import structlog

from activity_bookings.core.config import Settings, get_settings

_HANDLER_NAME = "activity_bookings"

# chatty libraries that would drown the request log
_QUIET_LOGGERS = ("uvicorn.access", "watchfiles", "httpx")


def _service_context(settings: Settings):
    def add_service(_, __, event_dict: dict) -> dict:
        event_dict.setdefault("service", settings.APP_NAME)
        event_dict.setdefault("env", settings.ENVIRONMENT)
        return event_dict

    return add_service


def _use_json(settings: Settings) -> bool:
    if settings.LOG_FORMAT:
        return settings.LOG_FORMAT.lower() == "json"
    return settings.ENVIRONMENT == "production"


def setup_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    as_json = _use_json(settings)

    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if as_json:
        pre_chain.append(_service_context(settings))
        pre_chain.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = structlog.processors.JSONRenderer() if as_json else structlog.dev.ConsoleRenderer(colors=True)
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )

    # one handler per process even when several apps start (tests do)
    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
