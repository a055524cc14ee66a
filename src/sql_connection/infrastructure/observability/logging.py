"""
Structured logging for sql-connection.
Provides consistent, machine-readable logs for the connection adapters.

Log Structure:
    {
        "app": "sql-connection",       # Application identifier
        "layer": "infrastructure",     # Architectural layer
        "component": "database-adapter",
        "module": "...",               # Python module (optional)
        "host": "db.example.com",      # Domain context
        "event": "pool_opened",        # What happened
        ...
    }

Connection URIs and passwords are never bound to a logger.
"""

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict

from sql_connection.config.state import LoggingConfig

Layer = Literal["infrastructure"]


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add the application identifier to every log entry."""
    event_dict["app"] = "sql-connection"
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Add severity level for cloud logging compatibility.
    Maps Python log levels to standard severity levels.
    """
    level = event_dict.get("level")
    if level:
        severity_map = {
            "debug": "DEBUG",
            "info": "INFO",
            "warning": "WARNING",
            "error": "ERROR",
            "critical": "CRITICAL",
        }
        event_dict["severity"] = severity_map.get(level, "INFO")
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON. If False, use human-readable format.
        include_timestamp: Whether to include ISO timestamps in logs

    Usage:
        >>> from sql_connection.infrastructure.observability import setup_logging
        >>> setup_logging(level="DEBUG", json_logs=False)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    # basicConfig is a no-op when the root logger already has handlers.
    logging.root.setLevel(log_level)

    processors = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(config: LoggingConfig) -> None:
    """
    Configure logging from the ``logging`` section of the loaded config.

    Extra keys allowed by LoggingConfig are ignored.

    Usage:
        >>> configure_logging(get_config().logging)
    """
    setup_logging(
        level=config.level,
        json_logs=config.json_logs,
        include_timestamp=config.include_timestamp,
    )


def get_logger(
    name: str | None = None,
    layer: Layer | None = None,
    component: str | None = None,
    **initial_context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance with architectural context bound.

    Args:
        name: Logger name (typically __name__ of the calling module)
        layer: Architectural layer (only "infrastructure" is bound today)
        component: Specific component within the layer
        **initial_context: Additional context key-value pairs to bind

    Usage:
        >>> log = get_logger(__name__, layer="infrastructure", component="postgres")
        >>> log.info("pool_opened", max_connections=5)
    """
    logger = structlog.get_logger(name)

    context = {}

    if layer:
        context["layer"] = layer

    if component:
        context["component"] = component

    if name:
        context["module"] = name

    context.update(initial_context)

    if context:
        logger = logger.bind(**context)

    return logger


def get_infrastructure_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for the infrastructure layer (database, config).

    Usage:
        >>> log = get_infrastructure_logger("config-loader", env="dev")
        >>> log.info("config_loaded")
    """
    return get_logger(
        "infrastructure",
        layer="infrastructure",
        component=component,
        **context,
    )


def get_database_logger(**context: Any) -> structlog.stdlib.BoundLogger:
    """
    Convenience alias for database adapter logging.

    Usage:
        >>> log = get_database_logger(host="db.example.com", database="orders")
        >>> log.debug("sql_statement", statement="SELECT 1")
    """
    return get_infrastructure_logger("database-adapter", **context)
