"""Lightweight websocket payload validation.

Minimal schema-like checking for the handful of client messages; not a JSON
Schema implementation. ``validate`` returns ``(ok, value_or_error)`` so the
caller decides what to do with a bad payload (the game handlers log it and
drop the message).

Schema mini-language:
{
  'field_name': ('type', required: bool, extras: dict)
}
Supported types: 'str', 'dict'
Extras: min_len / max_len (str), allow_empty (str)

If invalid: (False, {'field': 'direction', 'error': 'too long', 'code': 'max_len'})
If valid: (True, normalized_data)
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

PRIMITIVES = {
    "str": str,
    "dict": dict,
}


class ValidationError(Exception):
    def __init__(self, field: str, message: str, code: str):
        super().__init__(message)
        self.field = field
        self.message = message
        self.code = code

    def as_dict(self) -> Dict[str, str]:
        return {"field": self.field, "error": self.message, "code": self.code}


def _check_field(name: str, value: Any, type_name: str, extras: dict) -> Any:
    py_type = PRIMITIVES[type_name]
    if not isinstance(value, py_type):
        raise ValidationError(name, f"expected {type_name}", "type")
    if type_name != "str":
        return value
    s = value if extras.get("allow_empty") else value.strip()
    if not extras.get("allow_empty") and not s:
        raise ValidationError(name, "must not be empty", "empty")
    if "max_len" in extras and len(s) > extras["max_len"]:
        raise ValidationError(name, "too long", "max_len")
    if "min_len" in extras and len(s) < extras["min_len"]:
        raise ValidationError(name, "too short", "min_len")
    return s


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if not isinstance(payload, dict):
        return False, ValidationError("__root__", "payload must be an object", "type").as_dict()
    out = {}
    try:
        for name, spec in schema.items():
            type_name, required = spec[0], spec[1]
            extras = spec[2] if len(spec) > 2 else {}
            if type_name not in PRIMITIVES:
                raise ValidationError("__schema__", f"unsupported type {type_name}", "schema")
            if payload.get(name) is None:
                if required:
                    raise ValidationError(name, "missing required field", "required")
                continue
            out[name] = _check_field(name, payload[name], type_name, extras)
    except ValidationError as exc:
        return False, exc.as_dict()
    return True, out


# Predefined schemas used by handlers. ``player`` is the legacy client shape
# ({player: {id, ...}, direction}); ``playerId`` is preferred.
LOCATION_UPDATE = {
    "direction": ("str", True, {"min_len": 1, "max_len": 16}),
    "playerId": ("str", False, {"min_len": 1, "max_len": 64}),
    "player": ("dict", False),
}
