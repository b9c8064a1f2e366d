"""Tests for the Go module proxy client."""

import threading

import pytest
import requests

from common.errors import (
    RegistryError,
    RegistryNotFoundError,
    RequestCancelledError,
    ResponseTooLargeError,
    VersionResolutionError,
)
from registry.goproxy.client import RegistryClient

from conftest import PROXY, FakeSession


class TestListVersions:
    """Tests for the @v/list endpoint."""

    def test_parses_versions_in_order(self, client, session):
        session.routes[f"{PROXY}/example.com/mod/@v/list"] = (200, b"v0.1.0\nv0.2.0\n\nv1.0.0\n")

        assert client.list_versions("example.com/mod") == ["v0.1.0", "v0.2.0", "v1.0.0"]

    def test_empty_list(self, client, session):
        session.routes[f"{PROXY}/example.com/mod/@v/list"] = (200, b"")

        assert client.list_versions("example.com/mod") == []

    @pytest.mark.parametrize("status", [404, 410])
    def test_not_found_statuses(self, client, session, status):
        """404 and 410 are both the not-found condition."""
        session.routes[f"{PROXY}/example.com/gone/@v/list"] = (status, b"gone")

        with pytest.raises(RegistryNotFoundError) as exc_info:
            client.list_versions("example.com/gone")
        assert exc_info.value.status_code == status

    def test_server_error_is_not_not_found(self, client, session):
        session.routes[f"{PROXY}/example.com/mod/@v/list"] = (500, b"boom")

        with pytest.raises(RegistryError) as exc_info:
            client.list_versions("example.com/mod")
        assert not isinstance(exc_info.value, RegistryNotFoundError)
        assert exc_info.value.status_code == 500
        assert "500" in str(exc_info.value)

    def test_uppercase_module_is_encoded_in_url(self, client, session):
        session.routes[f"{PROXY}/github.com/!burnt!sushi/toml/@v/list"] = (200, b"v1.0.0\n")

        assert client.list_versions("github.com/BurntSushi/toml") == ["v1.0.0"]
        assert session.calls == [f"{PROXY}/github.com/!burnt!sushi/toml/@v/list"]


class TestLatest:
    """Tests for @latest and alias resolution."""

    def test_latest_returns_raw_metadata(self, client, session):
        body = b'{"Version":"v1.2.3","Time":"2024-01-01T00:00:00Z"}'
        session.routes[f"{PROXY}/example.com/mod/@latest"] = (200, body)

        assert client.latest("example.com/mod") == body.decode()

    def test_resolve_latest_extracts_version(self, client, session):
        session.routes[f"{PROXY}/example.com/mod/@latest"] = (
            200,
            b'{"Version":"v1.2.3","Time":"2024-01-01T00:00:00Z"}',
        )

        assert client.resolve_latest("example.com/mod") == "v1.2.3"

    def test_resolve_latest_without_marker(self, client, session):
        session.routes[f"{PROXY}/example.com/mod/@latest"] = (200, b'{"Time":"2024-01-01T00:00:00Z"}')

        with pytest.raises(VersionResolutionError):
            client.resolve_latest("example.com/mod")

    def test_resolve_latest_unterminated_value(self, client, session):
        session.routes[f"{PROXY}/example.com/mod/@latest"] = (200, b'{"Version":"v1.2.3')

        with pytest.raises(VersionResolutionError):
            client.resolve_latest("example.com/mod")


class TestReadModAndZip:
    """Tests for .mod and .zip downloads."""

    def test_read_mod(self, client, session):
        session.routes[f"{PROXY}/example.com/mod/@v/v1.0.0.mod"] = (200, b"module example.com/mod\n\ngo 1.21\n")

        assert client.read_mod("example.com/mod", "v1.0.0") == "module example.com/mod\n\ngo 1.21\n"

    def test_download_zip_returns_bytes(self, client, session):
        session.routes[f"{PROXY}/example.com/mod/@v/v1.0.0.zip"] = (200, b"PK\x03\x04data")

        assert client.download_zip("example.com/mod", "v1.0.0") == b"PK\x03\x04data"

    def test_base_url_trailing_slash_is_stripped(self, session):
        client = RegistryClient(base_url=PROXY + "/", session=session)
        session.routes[f"{PROXY}/example.com/mod/@v/v1.0.0.mod"] = (200, b"module example.com/mod\n")

        client.read_mod("example.com/mod", "v1.0.0")

        assert session.calls == [f"{PROXY}/example.com/mod/@v/v1.0.0.mod"]


class TestRequestContract:
    """Tests for size limits, transport failures, timeouts and cancellation."""

    def test_body_over_limit_is_rejected(self, session):
        client = RegistryClient(base_url=PROXY, session=session, max_bytes=10)
        session.routes[f"{PROXY}/example.com/mod/@v/v1.0.0.zip"] = (200, b"x" * 11)

        with pytest.raises(ResponseTooLargeError):
            client.download_zip("example.com/mod", "v1.0.0")

    def test_body_at_limit_is_accepted(self, session):
        client = RegistryClient(base_url=PROXY, session=session, max_bytes=10)
        session.routes[f"{PROXY}/example.com/mod/@v/v1.0.0.zip"] = (200, b"x" * 10)

        assert client.download_zip("example.com/mod", "v1.0.0") == b"x" * 10

    def test_transport_failure_is_registry_error(self, client, session, connection_error):
        session.routes[f"{PROXY}/example.com/mod/@v/list"] = connection_error

        with pytest.raises(RegistryError) as exc_info:
            client.list_versions("example.com/mod")
        assert not isinstance(exc_info.value, RegistryNotFoundError)
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_timeout_is_registry_error(self, client, session):
        session.routes[f"{PROXY}/example.com/mod/@v/list"] = requests.Timeout("slow")

        with pytest.raises(RegistryError):
            client.list_versions("example.com/mod")

    def test_timeout_is_forwarded(self, client, session):
        session.routes[f"{PROXY}/example.com/mod/@v/list"] = (200, b"v1.0.0\n")

        client.list_versions("example.com/mod", timeout=2.5)

        assert session.kwargs[0]["timeout"] == 2.5
        assert session.kwargs[0]["stream"] is True

    def test_cancelled_before_request(self, client, session):
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(RequestCancelledError):
            client.list_versions("example.com/mod", cancel_event=cancel)
        assert session.calls == []

    def test_cancelled_mid_body(self, client, session):
        """Cancellation during the body read fails the call; no partial body."""
        cancel = threading.Event()

        def _route():
            cancel.set()
            return 200, b"x" * 200_000

        session.routes[f"{PROXY}/example.com/mod/@v/v1.0.0.zip"] = _route

        with pytest.raises(RequestCancelledError):
            client.download_zip("example.com/mod", "v1.0.0", cancel_event=cancel)


class TestDefaultSession:
    """Tests for client construction."""

    def test_default_session_sets_user_agent(self):
        client = RegistryClient()
        assert client.base_url == "https://proxy.golang.org"
        assert "modlens" in client._session.headers["User-Agent"]

    def test_module_url(self):
        client = RegistryClient(base_url=PROXY, session=FakeSession())
        assert client.module_url("github.com/User/Repo", "/@latest") == f"{PROXY}/github.com/!user/!repo/@latest"
