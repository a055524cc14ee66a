"""Credentials passed to ``SqlConnection.open``."""

from dataclasses import dataclass, field


class Credentials:
    """Base type for anything a connection can authenticate with."""


@dataclass(frozen=True)
class NetworkCredentials(Credentials):
    """User name / password pair for a network database server."""

    user_name: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class TokenCredentials(Credentials):
    """Opaque bearer token. Not accepted by network adapters."""

    token: str = field(repr=False)
