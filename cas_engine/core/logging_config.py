"""
Logging configuration for the CAS extraction engine.

- Structured JSON logging in production, console rendering elsewhere
- stdlib integration so third-party loggers share the same formatter
- Environment-aware default levels
"""

import logging

import structlog

from cas_engine.core.config import settings


def configure_structlog() -> None:
    """
    Configure structlog on top of stdlib logging.
    Uses the ProcessorFormatter pattern so logger.info("event", key=val) works everywhere.
    """
    env = settings.environment

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if env == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    # CLI output goes to stdout, so diagnostics stay on stderr
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]


def get_log_level() -> str:
    """
    Get log level from settings with sensible per-environment defaults.

    Returns:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    env = settings.environment
    log_level = settings.log_level.upper()

    if log_level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        return log_level

    defaults = {
        "production": "INFO",
        "staging": "INFO",
        "development": "DEBUG",
        "test": "WARNING",
    }

    return defaults.get(env, "INFO")


def configure_logging(level: str = "") -> None:
    """
    Initialize logging for the API process or the CLI.

    Args:
        level: Explicit level override (e.g. from --verbose); falls back to the environment
    """
    configure_structlog()

    logging.getLogger().setLevel(level or get_log_level())

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
