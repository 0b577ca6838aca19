"""structlog setup for the catalog service.

Stdlib loggers obtained with ``logging.getLogger(__name__)`` are routed
through structlog's ``ProcessorFormatter`` so every line, including
library output, carries the bound request context.
"""

import logging
import sys

import structlog

SERVICE_NAME = "appcatalog"

# Third-party loggers that drown out catalog events at INFO
_NOISY_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


def _add_service(logger, method_name, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(log_level: str = "info", json_output: bool = False) -> None:
    """Route stdlib and structlog output through one formatter on stdout.

    Args:
        log_level: Logging level string (debug/info/warning/error).
        json_output: JSON lines when True, colored console output otherwise.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        final_processors = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        final_processors = [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *final_processors],
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name, noisy_level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(noisy_level, level))


def bind_request_context(trace_id: str, user_id: str | None = None) -> None:
    """Attach the trace id (and the actor once known) to subsequent log lines."""
    if user_id:
        structlog.contextvars.bind_contextvars(trace_id=trace_id, user_id=user_id)
    else:
        structlog.contextvars.bind_contextvars(trace_id=trace_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
