"""JSON Schemas (Draft-07) for the MCP tool inputs."""

from typing import Any, Dict

_MODULE = {
    "type": "string",
    "minLength": 1,
    "description": "Go module path, e.g. golang.org/x/tools",
}
_VERSION = {
    "type": "string",
    "minLength": 1,
    "description": "Module version or 'latest'",
}

LIST_VERSIONS_INPUT: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {"module": _MODULE},
    "required": ["module"],
    "additionalProperties": False,
}

READ_MOD_INPUT: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {"module": _MODULE, "version": _VERSION},
    "required": ["module", "version"],
    "additionalProperties": False,
}

LIST_FILES_INPUT: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "module": _MODULE,
        "version": _VERSION,
        "path": {"type": "string", "description": "Optional path prefix filter"},
    },
    "required": ["module", "version"],
    "additionalProperties": False,
}

READ_FILE_INPUT: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "module": _MODULE,
        "version": _VERSION,
        "path": {"type": "string", "minLength": 1, "description": "File path within the module"},
    },
    "required": ["module", "version", "path"],
    "additionalProperties": False,
}
