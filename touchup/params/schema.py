"""
Parameter schema and defaults per tool.
Single source for defaults (DEFAULT_OPTIONS), hard bounds (min/max) and the
narrower ranges the web UI exposes on its sliders (ui_min/ui_max).
"""
from typing import Any, Dict, Literal, Optional, Sequence

ParamType = Literal["int", "float", "choice"]

# Schema entry structure: type, default, min, max, ui_min, ui_max, choices, description
ParamSchemaEntry = Dict[str, Any]


def _make_param(
    param_type: ParamType,
    default: Any,
    description: str,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
    ui_min: Optional[float] = None,
    ui_max: Optional[float] = None,
    choices: Optional[Sequence[str]] = None,
) -> ParamSchemaEntry:
    """Helper to create a schema entry."""
    return {
        "type": param_type,
        "default": default,
        "min": min_val,
        "max": max_val,
        "ui_min": ui_min,
        "ui_max": ui_max,
        "choices": list(choices) if choices else None,
        "description": description,
    }


LEVEL_CHOICES = ("light", "medium", "strong")

# -----------------------------------------------------------------------------
# PARAM_SCHEMA: per tool, per param
# -----------------------------------------------------------------------------

PARAM_SCHEMA: Dict[str, Dict[str, ParamSchemaEntry]] = {
    "silence": {
        "aggression": _make_param(
            "int", 80, "Silence detection aggressiveness (%)",
            min_val=0, max_val=100, ui_min=70, ui_max=95,
        ),
    },
    "noise": {
        "noise_level": _make_param(
            "choice", "medium", "Noise gate strength", choices=LEVEL_CHOICES,
        ),
    },
    "loudness": {
        "target_lufs": _make_param(
            "float", -16.0, "Target loudness (approximate LUFS)",
            min_val=-60.0, max_val=0.0, ui_min=-24.0, ui_max=-10.0,
        ),
    },
    "quality": {
        "enhance_level": _make_param(
            "choice", "medium", "Enhancement strength", choices=LEVEL_CHOICES,
        ),
    },
}

TOOL_LABELS: Dict[str, str] = {
    "silence": "Remove silence",
    "noise": "Reduce noise",
    "loudness": "Normalize loudness",
    "quality": "Enhance quality",
}

# Flat defaults (ProcessOptions field -> value)
DEFAULT_OPTIONS: Dict[str, Any] = {
    name: entry["default"]
    for tool_schema in PARAM_SCHEMA.values()
    for name, entry in tool_schema.items()
}
