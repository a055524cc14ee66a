"""
Observability for the connection adapters: structlog configuration and
logger factories bound with layer/component context.
"""

from .logging import (
    configure_logging,
    get_database_logger,
    get_infrastructure_logger,
    get_logger,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "configure_logging",
    "get_logger",
    "get_infrastructure_logger",
    "get_database_logger",
]
