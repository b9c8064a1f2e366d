"""Shared fakes for registry, archive and filesystem tests."""

import io
import zipfile
from typing import Callable, Dict, List, Optional, Tuple, Union

import pytest
import requests

from cache.archive import ArchiveCache
from local.modcache import LocalMirror
from local.workspace import FallbackSuggester
from registry.goproxy.client import RegistryClient
from resolution.service import Resolver

PROXY = "https://proxy.test"

PNG_HEADER = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe"

Route = Union[Tuple[int, bytes], Callable[[], Tuple[int, bytes]], Exception]


class FakeResponse:
    """Minimal streamed requests.Response stand-in."""

    def __init__(self, status_code: int = 200, body: bytes = b""):
        self.status_code = status_code
        self._body = body
        self.closed = False

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self._body), chunk_size):
            yield self._body[i:i + chunk_size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Routes GETs by exact URL; unknown URLs answer 404."""

    def __init__(self, routes: Optional[Dict[str, Route]] = None):
        self.routes: Dict[str, Route] = dict(routes or {})
        self.calls: List[str] = []
        self.kwargs: List[dict] = []

    def get(self, url, **kwargs):
        self.calls.append(url)
        self.kwargs.append(kwargs)
        route = self.routes.get(url, (404, b"not found"))
        if isinstance(route, Exception):
            raise route
        if callable(route):
            route = route()
        status, body = route
        return FakeResponse(status, body)

    def count(self, suffix: str) -> int:
        return sum(1 for url in self.calls if url.endswith(suffix))


def make_zip(files: Dict[str, bytes], dirs: Tuple[str, ...] = ()) -> bytes:
    """Build an in-memory zip; names are written verbatim."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for d in dirs:
            zf.writestr(d, b"")
        for name, data in files.items():
            zf.writestr(name, data)
    return buf.getvalue()


def module_zip(module: str, version: str, files: Dict[str, bytes]) -> bytes:
    prefix = f"{module}@{version}/"
    return make_zip({prefix + k: v for k, v in files.items()}, dirs=(prefix,))


def write_tree(root, files: Dict[str, bytes]) -> None:
    for rel, data in files.items():
        target = root.joinpath(*rel.split("/"))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    return RegistryClient(base_url=PROXY, session=session)


@pytest.fixture
def modcache_dir(tmp_path):
    path = tmp_path / "modcache"
    path.mkdir()
    return path


@pytest.fixture
def workspace_dir(tmp_path):
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def resolver(client, modcache_dir, workspace_dir):
    return Resolver(
        client=client,
        archive_cache=ArchiveCache(),
        mirror=LocalMirror(str(modcache_dir)),
        suggester=FallbackSuggester(str(workspace_dir)),
    )


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
