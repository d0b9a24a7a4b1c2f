"""
Download filenames for processed audio: <originalBaseName>_<toolId>.wav
"""
import os

from touchup.export.wav import EXTENSION

DEFAULT_BASE_NAME = "audio"


def base_name(original_name: str) -> str:
    """Strip directory and last extension; 'take.final.mp3' -> 'take.final'."""
    name = os.path.basename((original_name or "").replace("\\", "/"))
    stem, _ext = os.path.splitext(name)
    return stem or DEFAULT_BASE_NAME


def output_filename(original_name: str, tool: str) -> str:
    return f"{base_name(original_name)}_{tool}.{EXTENSION}"
