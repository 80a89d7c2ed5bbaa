"""
Tool argument parsing.

These functions only check the JSON shape of loosely-typed tool arguments
(is it a string, a list, an object). Value rules such as lengths and enum
membership live in the domain normalizers, so every adapter validates the
same way.
"""

from typing import Any, Dict, List, Optional

from trillo_mcp.domain.errors import TaskDomainError


class PayloadValidationError(TaskDomainError):
    """Tool arguments do not have the expected JSON shape."""

    code = "validation_error"
    default_message = "Invalid request payload."

    def __init__(self, field: str, problem: str):
        super().__init__(self.default_message, {field: problem})
        self.field = field


def parse_args_record(args: Any) -> Dict[str, Any]:
    if args is None:
        return {}
    if not isinstance(args, dict):
        raise PayloadValidationError("arguments", "Tool arguments must be a JSON object.")
    return args


def parse_required_string(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise PayloadValidationError(field, f"{field} is required and must be a non-empty string.")
    return value.strip()


def parse_optional_string(value: Any, field: str) -> Optional[str]:
    """Absent (``None``) passes through; anything else must be a string."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise PayloadValidationError(field, f"{field} must be a string.")
    return value


def parse_optional_string_or_null(value: Any, field: str) -> Optional[str]:
    """
    Parse a field where an explicit ``null`` is meaningful (clear the value).

    Callers check ``field in args`` first when absence and ``null`` differ.
    """
    if value is not None and not isinstance(value, str):
        raise PayloadValidationError(field, f"{field} must be a string or null.")
    return value


def parse_string_list(value: Any, field: str) -> List[str]:
    if not isinstance(value, list):
        raise PayloadValidationError(field, f"{field} must be an array of strings.")
    for index, item in enumerate(value):
        if not isinstance(item, str) or not item.strip():
            raise PayloadValidationError(
                f"{field}[{index}]", f"{field}[{index}] must be a non-empty string."
            )
    return [item.strip() for item in value]


def parse_object_list(value: Any, field: str) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        raise PayloadValidationError(field, f"{field} must be an array of objects.")
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise PayloadValidationError(f"{field}[{index}]", f"{field}[{index}] must be an object.")
    return value
