"""
Params contract: only params that pass through here reach the transforms.
Renames the web UI's camelCase keys and drops keys the tool does not read.
In dev mode, log what was renamed or dropped.
"""
from typing import Any, Dict
import os
import logging

from touchup.params.schema import PARAM_SCHEMA

logger = logging.getLogger("audio-touchup.params")

# Keys as sent by the web UI
PARAM_ALIASES = {
    "noiseLevel": "noise_level",
    "targetLufs": "target_lufs",
    "enhanceLevel": "enhance_level",
}

DEV = os.environ.get("ENV", "development").lower() in ("development", "dev", "test")


def normalize_keys(params: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of params with UI aliases renamed; explicit snake_case keys win."""
    out = {}
    for key, value in params.items():
        name = PARAM_ALIASES.get(key, key)
        if name != key and name in params:
            continue
        out[name] = value
    return out


def to_engine_params(raw: Dict[str, Any], tool: str) -> Dict[str, Any]:
    """
    Normalize raw request params for one tool: rename aliases, drop unknown keys.
    This is the single entry point for all params that reach resolve_options.
    """
    params = normalize_keys(raw or {})
    known = PARAM_SCHEMA.get(tool, {})
    dropped = [k for k in params if k not in known]
    if dropped and DEV:
        logger.warning(
            "[Parameter Contract] Keys ignored for tool=%s: %s",
            tool,
            sorted(dropped),
        )
    return {k: v for k, v in params.items() if k in known}
