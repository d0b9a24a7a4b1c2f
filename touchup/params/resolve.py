"""
Option resolution: normalize incoming params, coerce and clamp them, then
merge onto DEFAULT_OPTIONS. Incoming params override defaults.
"""
import math
from typing import Any, Dict

from touchup.core.types import ProcessOptions, TOOLS
from touchup.params.clamp import clamp_params
from touchup.params.contract import to_engine_params
from touchup.params.schema import DEFAULT_OPTIONS, PARAM_SCHEMA


def _coerce(name: str, value: Any, entry: Dict[str, Any]) -> Any:
    """Convert one raw value to the schema type. Raises ValueError on bad input."""
    if entry["type"] == "choice":
        choice = str(value).strip().lower()
        if choice not in entry["choices"]:
            raise ValueError(
                f"Invalid {name} '{value}'. Allowed: {', '.join(entry['choices'])}"
            )
        return choice

    if isinstance(value, bool):
        raise ValueError(f"Invalid {name}: expected a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {name}: expected a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"Invalid {name}: {value!r} is not finite")
    if entry["type"] == "int":
        return int(round(number))
    return number


def resolve_params(tool: str, params: Dict[str, Any], ui_range: bool = False) -> Dict[str, Any]:
    """
    Resolve params for one tool to a plain dict:
    1. Normalize keys via the params contract (aliases, unknown keys dropped)
    2. Coerce each value to its schema type
    3. Clamp numeric values to schema bounds (or UI range when ui_range=True)
    4. Fill missing params with defaults
    """
    if tool not in TOOLS:
        raise ValueError(f"Unknown tool '{tool}'. Allowed: {', '.join(TOOLS)}")

    schema = PARAM_SCHEMA[tool]
    incoming = to_engine_params(params or {}, tool)
    coerced = {name: _coerce(name, value, schema[name]) for name, value in incoming.items()}
    clamped = clamp_params(tool, coerced, ui_range=ui_range)

    resolved = {name: DEFAULT_OPTIONS[name] for name in schema}
    resolved.update(clamped)
    return resolved


def resolve_options(tool: str, params: Dict[str, Any] = None, ui_range: bool = False) -> ProcessOptions:
    """Resolve params and build ProcessOptions; other tools' fields keep their defaults."""
    resolved = resolve_params(tool, params or {}, ui_range=ui_range)
    return ProcessOptions(tool=tool, **{**DEFAULT_OPTIONS, **resolved})
