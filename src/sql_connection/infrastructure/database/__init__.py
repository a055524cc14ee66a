"""Backend-independent SQL connection interfaces, credentials and errors."""

from .credentials import Credentials, NetworkCredentials, TokenCredentials
from .exceptions import ConfigurationError, ConnectionNotOpenError, SqlConnectionError
from .ports import Row, SqlConnection, SqlSchema

__all__ = [
    "Credentials",
    "NetworkCredentials",
    "TokenCredentials",
    "SqlConnectionError",
    "ConfigurationError",
    "ConnectionNotOpenError",
    "SqlConnection",
    "SqlSchema",
    "Row",
]
