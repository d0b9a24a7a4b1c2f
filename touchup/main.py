from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import logging
import base64
import binascii
import math

from touchup.core.errors import DecodeError, ProcessingError
from touchup.core.types import TOOLS
from touchup.export.naming import output_filename
from touchup.params.resolve import resolve_options
from touchup.params.schema import PARAM_SCHEMA, TOOL_LABELS
from touchup.pipeline import run_pipeline_async

# Configure Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("audio-touchup")

app = FastAPI(
    title="Audio Touch-Up Engine",
    version="1.0.0",
    description="Silence removal, noise reduction, loudness normalization and enhancement for short clips"
)

# CORS (Allow Frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], # Allow any local port
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _json_safe(stats: dict) -> dict:
    """JSON has no -inf/nan; report them as null."""
    return {
        k: (None if isinstance(v, float) and not math.isfinite(v) else v)
        for k, v in stats.items()
    }


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "audio-touchup"}


@app.get("/tools")
async def list_tools():
    """Tool ids with their parameter schema (defaults, bounds, UI ranges)."""
    return {
        tool: {"label": TOOL_LABELS[tool], "params": PARAM_SCHEMA[tool]}
        for tool in TOOLS
    }


@app.post("/process/{tool}")
async def process(tool: str, body: dict):
    """
    Processes one clip.
    Body: { "audio": <base64 bytes>, "filename": "take.mp3", "params": {...} }
    Returns JSON with base64-encoded WAV, download filename, resolved_params and stats.
    """
    if tool not in TOOLS:
        raise HTTPException(status_code=404, detail=f"Unknown tool '{tool}'")

    encoded = body.get("audio")
    if not isinstance(encoded, str) or not encoded:
        raise HTTPException(status_code=422, detail="Field 'audio' (base64) is required.")
    try:
        audio_bytes = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=422, detail="Field 'audio' is not valid base64.")

    params = body.get("params") or {}
    if not isinstance(params, dict):
        raise HTTPException(status_code=422, detail="Field 'params' must be an object.")
    try:
        options = resolve_options(tool, params)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    filename = body.get("filename") or ""
    logger.info("Processing %s (%.2f KB) with tool=%s", filename or "<unnamed>", len(audio_bytes) / 1024, tool)

    try:
        result = await run_pipeline_async(audio_bytes, options)
    except DecodeError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except ProcessingError as exc:
        raise HTTPException(status_code=500, detail=str(exc))

    return {
        "audio": base64.b64encode(result.wav_bytes).decode("utf-8"),
        "filename": output_filename(filename, tool),
        "resolved_params": options.params(),
        "stats": {
            "input": _json_safe(result.input_stats),
            "output": _json_safe(result.output_stats),
        },
    }


if __name__ == "__main__":
    uvicorn.run("touchup.main:app", host="0.0.0.0", port=8000, reload=True)
