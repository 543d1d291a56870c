"""Structured logging setup using structlog.

Implements a **dual-renderer pattern**: one shared processor chain (context
vars, log level, timestamps, stack info) feeds either a ConsoleRenderer for
a person watching a terminal or a JSONRenderer for CI log collectors.

The renderer is picked by :func:`use_json_output`:

- ``log_format="json"`` or ``"console"`` forces one renderer;
- ``log_format="auto"`` (the default) renders JSON when ``APP_ENV`` is
  ``"production"`` or when stderr is not a terminal, which is the normal
  case on a CI runner where the output is captured to a file.

Everything is written to stderr: stdout belongs to the CLI's JSON summary.
Standard-library ``logging`` is routed through the same formatter so any
third-party output lands in the same format.
"""

import logging
import os
import sys
from typing import TextIO

import structlog

LOG_FORMATS = ("auto", "console", "json")


def use_json_output(
    log_format: str = "auto",
    app_env: str | None = None,
    stream: TextIO | None = None,
) -> bool:
    """Decide between the JSON and console renderers.

    Args:
        log_format: ``"auto"``, ``"console"`` or ``"json"``.
        app_env: Deployment environment; defaults to ``$APP_ENV``.
        stream: Stream the logs go to; defaults to ``sys.stderr``.

    Returns:
        True when logs should be rendered as JSON lines.

    Raises:
        ValueError: If *log_format* is not one of :data:`LOG_FORMATS`.
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(f"log_format must be one of {LOG_FORMATS}, got {log_format!r}")
    if log_format != "auto":
        return log_format == "json"

    if app_env is None:
        app_env = os.environ.get("APP_ENV", "development")
    if app_env == "production":
        return True

    stream = stream if stream is not None else sys.stderr
    isatty = getattr(stream, "isatty", None)
    return not (isatty is not None and isatty())


def configure_logging(
    log_level: str = "INFO",
    json_output: bool | None = None,
) -> structlog.BoundLogger:
    """Configure structlog for the buildcache CLI.

    Args:
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON (True) or console (False) rendering.  None
                     defers to :func:`use_json_output` in ``auto`` mode.

    Returns:
        A configured structlog BoundLogger.
    """
    use_json = use_json_output() if json_output is None else json_output

    # Order matters: contextvars first, then level/timestamps.
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        # JSON has no traceback renderer of its own.
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Bridge stdlib logging through the same pipeline.
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
    root_logger.setLevel(log_level.upper())

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)
