"""modlens - MCP server for browsing Go module versions, manifests and sources.

Resolves (module, version) pairs through the local module cache, an
in-memory archive cache and the Go module proxy.

    Returns:
        int: Exit code
"""
import logging
import sys

from constants import ExitCodes
from common.logging_utils import configure_logging
from args import parse_args
from cli_config import ServerConfig

__version__ = "0.1.0"


def main(argv=None):
    """Main entry point: parse flags, configure logging and serve MCP."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)
    if bool(args.MCP_HOST) != bool(args.MCP_PORT):
        logging.error("--host and --port must be given together")
        sys.exit(ExitCodes.FILE_ERROR.value)

    config = ServerConfig.from_args(args)

    from cli_mcp import run_mcp_server  # pylint: disable=import-outside-toplevel
    run_mcp_server(config)
    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
