"""MCP server exposing Go module browsing tools via the official MCP Python SDK.

This module implements an MCP server with four tools:
  - gomod_list_versions
  - gomod_read_mod
  - gomod_list_files
  - gomod_read_file

Transport defaults to stdio JSON-RPC. If --host/--port are provided via CLI,
we'll run with streamable HTTP transport as a non-standard alternative.

The tool handlers only validate input, call the resolver and render its
results as text; tier ordering and error classification live in
``resolution.service``.
"""
from __future__ import annotations

import logging
import sys
from typing import Any, Optional

from constants import Constants, ExitCodes
from cache.archive import ArchiveCache
from cli_config import ServerConfig
from common.errors import ModlensError, RegistryNotFoundError
from local.modcache import LocalMirror
from local.workspace import FallbackSuggester
from mcp_schemas import LIST_FILES_INPUT, LIST_VERSIONS_INPUT, READ_FILE_INPUT, READ_MOD_INPUT
from mcp_validate import SchemaError, validate_input
from registry.goproxy.client import RegistryClient
from resolution.models import FileListing, VersionListing
from resolution.service import Resolver

# Official MCP SDK (FastMCP)
try:
    from mcp.server.fastmcp import FastMCP  # type: ignore
except ImportError:  # pragma: no cover - import error surfaced at runtime
    FastMCP = None  # type: ignore

logger = logging.getLogger(__name__)


class ToolFailure(Exception):
    """A tool call that must be reported to the agent as an error result."""


def build_resolver(config: ServerConfig) -> Resolver:
    """Wire the resolver from config; the archive cache is created here and owned by it."""
    return Resolver(
        client=RegistryClient(base_url=config.proxy_url),
        archive_cache=ArchiveCache(),
        mirror=LocalMirror(config.modcache_dir),
        suggester=FallbackSuggester(config.local_dir),
    )


# ----------------------------
# Text rendering
# ----------------------------

def render_versions(listing: VersionListing) -> str:
    if listing.suggestion:
        return listing.suggestion
    lines = [f"Versions of {listing.module}:"]
    lines.extend(listing.versions)
    text = "\n".join(lines) + "\n"
    if listing.latest_info:
        text += "\nLatest info:\n" + listing.latest_info
    return text


def render_files(listing: FileListing) -> str:
    header = f"Files in {listing.module}@{listing.version}"
    if listing.prefix:
        header += f" (prefix: {listing.prefix})"
    header += f" ({len(listing.files)} files):\n"
    return header + "".join(f"{name}\n" for name in listing.files)


def not_found_message(module: str) -> str:
    return f'Module "{module}" not found on the Go module proxy.'


# ----------------------------
# Tool handlers
# ----------------------------

def _validate(schema, data) -> None:
    try:
        validate_input(schema, data)
    except SchemaError as se:
        raise ToolFailure(str(se)) from se


def handle_list_versions(resolver: Resolver, module: str, timeout: Optional[float] = None) -> str:
    _validate(LIST_VERSIONS_INPUT, {"module": module})
    try:
        listing = resolver.list_versions(module, timeout=timeout)
    except RegistryNotFoundError as exc:
        raise ToolFailure(not_found_message(module)) from exc
    except ModlensError as exc:
        raise ToolFailure(str(exc)) from exc
    return render_versions(listing)


def handle_read_mod(resolver: Resolver, module: str, version: str, timeout: Optional[float] = None) -> str:
    _validate(READ_MOD_INPUT, {"module": module, "version": version})
    try:
        return resolver.read_manifest(module, version, timeout=timeout).content
    except ModlensError as exc:
        raise ToolFailure(str(exc)) from exc


def handle_list_files(
    resolver: Resolver,
    module: str,
    version: str,
    path: str = "",
    timeout: Optional[float] = None,
) -> str:
    _validate(LIST_FILES_INPUT, {"module": module, "version": version, "path": path})
    try:
        return render_files(resolver.list_files(module, version, path, timeout=timeout))
    except ModlensError as exc:
        raise ToolFailure(str(exc)) from exc


def handle_read_file(
    resolver: Resolver,
    module: str,
    version: str,
    path: str,
    timeout: Optional[float] = None,
) -> str:
    _validate(READ_FILE_INPUT, {"module": module, "version": version, "path": path})
    try:
        return resolver.read_file(module, version, path, timeout=timeout).content
    except ModlensError as exc:
        raise ToolFailure(str(exc)) from exc


# ----------------------------
# Server wiring
# ----------------------------

def build_server(resolver: Resolver, timeout: Optional[float] = None) -> Any:
    """Create a FastMCP server with the four tools registered."""
    if FastMCP is None:
        raise RuntimeError("MCP server not available: 'mcp' package is not installed.")
    from mcp.server.fastmcp.exceptions import ToolError  # pylint: disable=import-outside-toplevel

    mcp = FastMCP(Constants.SERVER_NAME)

    def _call(handler, *args):
        try:
            return handler(resolver, *args, timeout=timeout)
        except ToolFailure as exc:
            # FastMCP turns ToolError into an isError result with this text
            raise ToolError(str(exc)) from exc

    @mcp.tool(
        name="gomod_list_versions",
        description=(
            "List available versions of a Go module from the Go module proxy. "
            "Returns version list and latest version info."
        ),
    )
    def gomod_list_versions(module: str) -> str:
        return _call(handle_list_versions, module)

    @mcp.tool(
        name="gomod_read_mod",
        description=(
            "Read the go.mod file of a Go module at a specific version. "
            "Use version 'latest' to auto-resolve."
        ),
    )
    def gomod_read_mod(module: str, version: str) -> str:
        return _call(handle_read_mod, module, version)

    @mcp.tool(
        name="gomod_list_files",
        description="List files in a Go module's source archive. Optionally filter by path prefix.",
    )
    def gomod_list_files(module: str, version: str, path: str = "") -> str:
        return _call(handle_list_files, module, version, path)

    @mcp.tool(
        name="gomod_read_file",
        description="Read a source file from a Go module's archive. Rejects binary files.",
    )
    def gomod_read_file(module: str, version: str, path: str) -> str:
        return _call(handle_read_file, module, version, path)

    return mcp


def run_mcp_server(config: ServerConfig) -> None:
    if FastMCP is None:
        sys.stderr.write("MCP server not available: 'mcp' package is not installed.\n")
        sys.exit(ExitCodes.MCP_UNAVAILABLE.value)

    resolver = build_resolver(config)
    mcp = build_server(resolver, timeout=config.request_timeout)
    logger.info(
        "Starting %s (proxy=%s, modcache=%s, local=%s)",
        Constants.SERVER_NAME,
        config.proxy_url,
        config.modcache_dir or "<disabled>",
        config.local_dir,
    )

    if config.host and config.port:
        # Non-standard/custom for this repo: expose streamable HTTP for testing tools
        mcp.settings.host = config.host
        mcp.settings.port = int(config.port)
        mcp.run(transport="streamable-http")
    else:
        mcp.run()  # defaults to stdio
