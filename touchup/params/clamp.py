"""
Parameter clamping to the schema's hard bounds.
"""
from typing import Any, Dict, Optional

from touchup.params.schema import PARAM_SCHEMA


def clamp_if_bounds(
    value: float,
    min: Optional[float] = None,
    max: Optional[float] = None,
) -> float:
    """
    Clamp value to [min, max] when bounds are not None.
    If both are None, returns value unchanged.
    """
    if min is not None and value < min:
        return min
    if max is not None and value > max:
        return max
    return value


def clamp_params(tool: str, params: Dict[str, Any], ui_range: bool = False) -> Dict[str, Any]:
    """
    Clamp numeric params to their schema bounds.
    ui_range=True clamps to the narrower slider range instead.
    Returns a new dict (does not mutate input).
    """
    result = dict(params)
    for name, entry in PARAM_SCHEMA.get(tool, {}).items():
        if name not in result or entry["type"] == "choice":
            continue
        lo = entry["ui_min"] if ui_range else entry["min"]
        hi = entry["ui_max"] if ui_range else entry["max"]
        result[name] = clamp_if_bounds(result[name], lo, hi)
    return result
