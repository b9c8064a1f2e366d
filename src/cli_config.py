"""Runtime configuration: CLI flags, environment, YAML config file, defaults.

Precedence, highest first: CLI flags, environment variables, the YAML file
named by ``--config``, built-in defaults. A missing or malformed config file
is logged and ignored so the server still starts.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

_CONFIG_KEYS = ("proxy_url", "local_dir", "modcache_dir", "request_timeout")


@dataclass
class ServerConfig:
    """Configuration for the resolver and the MCP server."""

    proxy_url: str = Constants.PROXY_URL_DEFAULT
    local_dir: str = ""
    modcache_dir: str = ""
    request_timeout: Optional[float] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None

    @classmethod
    def from_args(cls, args: Any, environ: Optional[Dict[str, str]] = None) -> "ServerConfig":
        """Create config from parsed CLI arguments, the environment and --config.

        Args:
            args: Parsed CLI arguments namespace.
            environ: Environment mapping; defaults to ``os.environ``.

        Returns:
            ServerConfig instance.
        """
        env = os.environ if environ is None else environ
        file_values = load_config_file(getattr(args, "CONFIG", None))

        config = cls(
            log_level=getattr(args, "LOG_LEVEL", None) or "INFO",
            log_file=getattr(args, "LOG_FILE", None),
            host=getattr(args, "MCP_HOST", None),
            port=getattr(args, "MCP_PORT", None),
        )

        config.proxy_url = (
            getattr(args, "PROXY_URL", None)
            or env.get(Constants.ENV_PROXY_URL)
            or file_values.get("proxy_url")
            or Constants.PROXY_URL_DEFAULT
        )
        config.local_dir = (
            getattr(args, "LOCAL_DIR", None)
            or env.get(Constants.ENV_LOCAL_DIR)
            or file_values.get("local_dir")
            or default_local_dir()
        )
        config.modcache_dir = (
            getattr(args, "MODCACHE_DIR", None)
            or env.get(Constants.ENV_GOMODCACHE)
            or file_values.get("modcache_dir")
            or discover_modcache_dir(env)
        )

        timeout = getattr(args, "REQUEST_TIMEOUT", None)
        if timeout is None:
            timeout = file_values.get("request_timeout")
        if timeout is not None:
            try:
                config.request_timeout = float(timeout)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid request_timeout %r", timeout)

        config.local_dir = os.path.expanduser(config.local_dir)
        config.modcache_dir = os.path.expanduser(config.modcache_dir)
        return config


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load recognised keys from a YAML config file.

    Args:
        config_path: Path to a YAML (or JSON, which YAML parses) file.

    Returns:
        Dict of recognised keys; empty when the file is absent or invalid.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Could not load config file %s: %s", config_path, exc)
        return {}

    if not isinstance(data, dict):
        return {}
    unknown = sorted(set(data) - set(_CONFIG_KEYS))
    if unknown:
        logger.debug("Ignoring unknown config keys: %s", ", ".join(map(str, unknown)))
    return {k: data[k] for k in _CONFIG_KEYS if data.get(k) is not None}


def default_local_dir() -> str:
    """``~/Projects``, the default workspace searched for fallback suggestions."""
    return os.path.join(os.path.expanduser("~"), Constants.LOCAL_DIR_DEFAULT)


def discover_modcache_dir(environ: Optional[Dict[str, str]] = None) -> str:
    """Locate the Go module cache.

    Asks ``go env GOMODCACHE`` first, then falls back to ``$GOPATH/pkg/mod``.
    Returns an empty string (mirror disabled) when neither is available.
    """
    env = os.environ if environ is None else environ
    try:
        result = subprocess.run(
            ["go", "env", "GOMODCACHE"],
            capture_output=True,
            text=True,
            timeout=10,
            check=False,
        )
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout.strip()
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("go env GOMODCACHE failed: %s", exc)

    gopath = env.get(Constants.ENV_GOPATH)
    if gopath:
        first = gopath.split(os.pathsep)[0]
        if first:
            return os.path.join(first, "pkg", "mod")

    logger.warning("Could not determine GOMODCACHE; module cache lookups disabled")
    return ""
