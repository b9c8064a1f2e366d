"""JSON Schema validation helpers for MCP tool input contracts.

Wraps jsonschema Draft7 validation and raises on the first error so bad
tool arguments never reach the resolver.
"""

from __future__ import annotations

from typing import Any, Dict

from jsonschema import Draft7Validator


class SchemaError(ValueError):
    """Raised when data fails to validate against a provided schema."""


def validate_input(schema: Dict[str, Any], data: Dict[str, Any]) -> None:
    """Validate tool input strictly and raise on the first error.

    Args:
        schema: Draft-07 JSON Schema dict.
        data:   Input payload to validate.
    """
    validator = Draft7Validator(schema)
    errs = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        msg = f"Invalid input at '{path}': {first.message}"
        raise SchemaError(msg)
