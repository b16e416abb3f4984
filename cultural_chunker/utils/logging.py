"""Structured logging setup using structlog.

Implements a **dual-renderer pattern**: one shared processor chain (context
vars, log level, logger name, timestamps, stack info) feeds into either a
coloured ConsoleRenderer for local development or a JSONRenderer for
production.  The renderer is picked from the application environment
(``CULTURAL_CHUNKER_APP_ENV`` or ``APP_ENV``, default ``"development"``) or
forced with ``json_output``.

Standard-library ``logging`` is routed through the same formatter so a host
application's own loggers produce identically formatted output.

Pipeline code binds ``document_id`` with :func:`document_context` so every
event logged while a document is processed carries it automatically.
"""

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from cultural_chunker.utils.errors import ConfigurationError

_VALID_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "FATAL"})


def _resolve_app_env(app_env: str | None) -> str:
    if app_env:
        return app_env
    return os.environ.get(
        "CULTURAL_CHUNKER_APP_ENV", os.environ.get("APP_ENV", "development")
    )


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    app_env: str | None = None,
) -> structlog.BoundLogger:
    """Configure structlog with environment-appropriate rendering.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: Force JSON output.  Otherwise JSON is used only when
            the application environment is ``"production"``.
        app_env: Application environment; read from the environment when
            omitted.

    Returns:
        A configured structlog BoundLogger.

    Raises:
        ConfigurationError: If *log_level* is not a known level name.
    """
    level_name = log_level.upper()
    if level_name not in _VALID_LEVELS:
        raise ConfigurationError(f"Unknown log level '{log_level}'")
    level = logging.getLevelName(level_name)

    use_json = json_output or _resolve_app_env(app_env) == "production"

    # Order matters: contextvars first, then level/name/timestamps, then exceptions.
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *shared_processors,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger.

    If structlog has not been configured yet, calls configure_logging() with defaults.

    Args:
        name: Logger name, typically the module name.

    Returns:
        A structlog BoundLogger bound with the given name.
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)


@contextmanager
def document_context(document_id: str) -> Iterator[None]:
    """Bind *document_id* to every event logged inside the ``with`` block.

    Bindings live in context variables, so they stay on the thread (or
    task) that entered the block.
    """
    with structlog.contextvars.bound_contextvars(document_id=document_id):
        yield
