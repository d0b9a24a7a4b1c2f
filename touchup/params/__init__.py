"""
Parameter schema, defaults and resolution for the four tools.
Default values: single source is schema.DEFAULT_OPTIONS; use resolve_options(tool, {}) for resolved defaults.
"""
from touchup.params.schema import PARAM_SCHEMA, DEFAULT_OPTIONS
from touchup.params.resolve import resolve_params, resolve_options
from touchup.params.clamp import clamp_params

__all__ = ["PARAM_SCHEMA", "DEFAULT_OPTIONS", "resolve_params", "resolve_options", "clamp_params"]
