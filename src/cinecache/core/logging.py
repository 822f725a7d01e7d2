"""Structured logging on top of the standard library.

structlog renders every record, including those from uvicorn and httpx, as
JSON in production and as coloured key/value lines in development. The
request middleware binds a ``request_id`` into structlog's context, so every
event logged while serving a request (cache hits, TMDB calls, failures)
carries it.

Usage:
    from cinecache.core.logging import configure_logging, get_logger

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info("cache_hit", cache_key="movie:550")
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from cinecache.config import Settings

REQUEST_ID_KEY = "request_id"

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def bind_request_id(request_id: str) -> None:
    """Attach a request ID to every event logged in the current context."""
    structlog.contextvars.bind_contextvars(**{REQUEST_ID_KEY: request_id})


def get_request_id() -> str | None:
    return structlog.contextvars.get_contextvars().get(REQUEST_ID_KEY)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def _service_tagger(service: str) -> Processor:
    def add_service(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("service", service)
        return event_dict

    return add_service


def _renderer(settings: Settings) -> Processor:
    if settings.use_json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Safe to call more than once; the root handler is replaced each time.

    Args:
        settings: Application settings. If None, uses the cached settings.
    """
    if settings is None:
        from cinecache.config import get_settings

        settings = get_settings()

    level = logging.getLevelName(settings.log_level.value)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _service_tagger(settings.app_name.lower()),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.use_json_logs:
        pre_chain.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, optionally pre-bound with values.

    Args:
        name: Logger name, typically ``__name__``
        **initial_values: Key/values included in every event from this logger
    """
    return structlog.get_logger(name, **initial_values)


def log_context(**kwargs: Any) -> Any:
    """Bind values to every event logged inside a ``with`` block.

    Example:
        with log_context(movie_id=550):
            logger.info("fetching_reviews")  # includes movie_id
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
