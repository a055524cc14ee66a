"""Tests for credentials and the connection error hierarchy."""

import dataclasses

import pytest

from sql_connection.infrastructure.database import (
    ConfigurationError,
    ConnectionNotOpenError,
    Credentials,
    NetworkCredentials,
    SqlConnectionError,
    TokenCredentials,
)


class TestCredentials:
    def test_network_credentials_fields(self):
        creds = NetworkCredentials("alice", "secret")

        assert isinstance(creds, Credentials)
        assert creds.user_name == "alice"
        assert creds.password == "secret"

    def test_repr_hides_secrets(self):
        assert "secret" not in repr(NetworkCredentials("alice", "secret"))
        assert "tok-123" not in repr(TokenCredentials("tok-123"))

    def test_credentials_are_frozen(self):
        creds = NetworkCredentials("alice", "secret")

        with pytest.raises(dataclasses.FrozenInstanceError):
            creds.password = "other"

    def test_token_credentials_are_not_network_credentials(self):
        assert not isinstance(TokenCredentials("t"), NetworkCredentials)


class TestErrorHierarchy:
    def test_configuration_error_is_value_error(self):
        err = ConfigurationError("bad credentials", connection="h:5432/d")

        assert isinstance(err, SqlConnectionError)
        assert isinstance(err, ValueError)
        assert err.connection == "h:5432/d"
        assert str(err) == "bad credentials"

    def test_not_open_error_is_runtime_error(self):
        err = ConnectionNotOpenError("not open")

        assert isinstance(err, SqlConnectionError)
        assert isinstance(err, RuntimeError)
        assert err.connection is None
