"""Argument Validation — checks tools/call arguments against a tool's inputSchema.

Invariants:
    - Pure: returns a NEW dict, the caller's arguments are never mutated
    - Hard failures: missing required field, value outside a declared enum,
      non-numeric value for a number field, non-list value for an array field
    - Declared "default" values are filled in for absent optional fields
    - A None value counts as absent
    - Every failure is a ToolValidationError naming the field

Design Decisions:
    - Not a full JSON Schema validator: schemas are documentation first; only the
      checks handlers rely on are enforced (numbers feed LIMIT, enums pick a branch)
    - Numbers accept int, integral float, or a digit string: voice agents send "5"
"""

import copy
import re
from typing import Any

from record_gateway.core.domain_types import RecordId
from record_gateway.core.errors import ToolValidationError

_RECORD_ID = re.compile(r"^[A-Za-z0-9]{15}(?:[A-Za-z0-9]{3})?$")


def _coerce_number(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ToolValidationError(f"{name} must be a number, got boolean", name)
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        raise ToolValidationError(f"{name} must be a whole number, got {value!r}", name)
    if number < 1:
        raise ToolValidationError(f"{name} must be at least 1, got {number}", name)
    return number


def _coerce_boolean(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ToolValidationError(f"{name} must be a boolean, got {value!r}", name)


def _check_value(name: str, spec: dict, value: Any) -> Any:
    allowed = spec.get("enum")
    if allowed is not None and value not in allowed:
        raise ToolValidationError(
            f"{name} must be one of: {', '.join(map(str, allowed))} (got {value!r})", name,
        )
    kind = spec.get("type")
    if kind in ("number", "integer"):
        return _coerce_number(name, value)
    if kind == "boolean":
        return _coerce_boolean(name, value)
    if kind == "array" and not isinstance(value, list):
        raise ToolValidationError(f"{name} must be an array", name)
    return value


def validate_arguments(tool: dict, arguments: Any) -> dict:
    """Validate arguments for one tool definition; returns arguments with defaults."""
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ToolValidationError("arguments must be an object", "arguments")

    schema = tool.get("inputSchema", {})
    properties: dict = schema.get("properties", {})
    missing = [
        name for name in schema.get("required", [])
        if arguments.get(name) is None
    ]
    if missing:
        raise ToolValidationError(
            f"Missing required argument(s) for {tool['name']}: {', '.join(missing)}",
            missing[0],
        )

    validated = copy.deepcopy(arguments)
    for name, spec in properties.items():
        value = validated.get(name)
        if value is None:
            if "default" in spec:
                validated[name] = copy.deepcopy(spec["default"])
            else:
                validated.pop(name, None)
            continue
        validated[name] = _check_value(name, spec, value)
    return validated


def require_record_id(value: Any, field: str) -> RecordId:
    """Record ids are 15 or 18 alphanumeric characters."""
    if not isinstance(value, str) or not _RECORD_ID.fullmatch(value):
        raise ToolValidationError(
            f"{field} must be a 15 or 18 character record id, got {value!r}", field,
        )
    return RecordId(value)
