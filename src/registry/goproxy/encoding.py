"""Module path encoding for the Go module proxy protocol."""
from __future__ import annotations

from constants import Constants


def encode_path(path: str) -> str:
    """Case-escape a module path for proxy URLs and module cache directories.

    Every ASCII uppercase letter becomes ``!`` followed by its lowercase form;
    all other characters pass through unchanged.

    >>> encode_path("github.com/BurntSushi/toml")
    'github.com/!burnt!sushi/toml'
    """
    out = []
    for ch in path:
        if "A" <= ch <= "Z":
            out.append(Constants.CASE_ESCAPE)
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def last_path_segment(module: str) -> str:
    """Return the final ``/``-separated component, e.g. ``golang.org/x/tools`` -> ``tools``."""
    return module.rsplit("/", 1)[-1]
