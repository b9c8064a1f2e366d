"""Argument parsing functionality for modlens."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="modlens",
        description=(
            "modlens - MCP server for browsing Go modules via the module proxy"
        ),
        add_help=True,
    )

    parser.add_argument("--proxy-url",
                        dest="PROXY_URL",
                        help=f"Go module proxy base URL (default: {Constants.PROXY_URL_DEFAULT})",
                        action="store",
                        type=str)
    parser.add_argument("--local-dir",
                        dest="LOCAL_DIR",
                        help="Base directory for local module fallback (default: ~/Projects)",
                        action="store",
                        type=str)
    parser.add_argument("--modcache-dir",
                        dest="MODCACHE_DIR",
                        help="Go module cache directory (default: go env GOMODCACHE)",
                        action="store",
                        type=str)
    parser.add_argument("--timeout",
                        dest="REQUEST_TIMEOUT",
                        help="Per-request timeout in seconds (default: none)",
                        action="store",
                        type=float)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML or JSON)",
                        action="store",
                        type=str)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=Constants.LOG_LEVELS,
                        default="INFO")
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    # Non-standard: streamable HTTP transport instead of stdio
    parser.add_argument("--host",
                        dest="MCP_HOST",
                        help="Serve streamable HTTP on this host (requires --port)",
                        action="store",
                        type=str)
    parser.add_argument("--port",
                        dest="MCP_PORT",
                        help="Serve streamable HTTP on this port (requires --host)",
                        action="store",
                        type=int)

    return parser.parse_args(argv)
