"""
Pipeline orchestrator: decode -> transform -> encode.

One run is a strictly sequential chain with coarse progress milestones.
Any failure moves the run to FAILED and surfaces exactly one error:
DecodeError for undecodable input, ProcessingError for everything else.
No partial output is returned.

Runs share no mutable state, so concurrent runs need no coordination.
There is no cancellation; a started run finishes or fails.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional

from touchup.core.errors import DecodeError, ProcessingError, TouchupError
from touchup.core.io import AudioIO
from touchup.core.types import AudioBuffer, ProcessOptions
from touchup.dsp import apply_transform
from touchup.export.wav import encode_wav
from touchup.qc.qc import analyze

logger = logging.getLogger("audio-touchup.pipeline")

ProgressCallback = Callable[[int], None]

# Progress milestones (percent)
PROGRESS_DECODE_START = 10
PROGRESS_DECODED = 30
PROGRESS_TRANSFORMED = 70
PROGRESS_DONE = 100


class PipelineState(str, Enum):
    IDLE = "idle"
    DECODING = "decoding"
    TRANSFORMING = "transforming"
    ENCODING = "encoding"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineResult:
    wav_bytes: bytes
    tool: str
    input_stats: Dict = field(default_factory=dict)
    output_stats: Dict = field(default_factory=dict)


class AudioPipeline:
    """
    Single-shot pipeline for one input. Create a new instance per run.
    on_progress receives integer percentages; it is advisory only.
    """

    def __init__(self, options: ProcessOptions, on_progress: Optional[ProgressCallback] = None):
        self.options = options
        self.on_progress = on_progress
        self.state = PipelineState.IDLE
        self.error: Optional[TouchupError] = None

    def _enter(self, state: PipelineState) -> None:
        logger.debug("[%s] %s -> %s", self.options.tool, self.state.value, state.value)
        self.state = state

    def _progress(self, percent: int) -> None:
        if self.on_progress is not None:
            self.on_progress(percent)

    def _fail(self, error: TouchupError) -> TouchupError:
        self.state = PipelineState.FAILED
        self.error = error
        logger.error("[%s] Processing failed: %s", self.options.tool, error)
        return error

    def decode(self, data: bytes) -> AudioBuffer:
        self._enter(PipelineState.DECODING)
        self._progress(PROGRESS_DECODE_START)
        buffer = AudioIO.decode(data)
        self._progress(PROGRESS_DECODED)
        return buffer

    def transform(self, buffer: AudioBuffer) -> AudioBuffer:
        self._enter(PipelineState.TRANSFORMING)
        processed = apply_transform(buffer, self.options)
        if processed.channel_count != buffer.channel_count or processed.sample_rate != buffer.sample_rate:
            raise ProcessingError(
                f"Transform '{self.options.tool}' changed buffer shape: "
                f"{buffer.channel_count}ch@{buffer.sample_rate} -> "
                f"{processed.channel_count}ch@{processed.sample_rate}"
            )
        if processed.frame_count > buffer.frame_count:
            raise ProcessingError(
                f"Transform '{self.options.tool}' grew the buffer: "
                f"{buffer.frame_count} -> {processed.frame_count} frames"
            )
        self._progress(PROGRESS_TRANSFORMED)
        return processed

    def encode(self, buffer: AudioBuffer) -> bytes:
        self._enter(PipelineState.ENCODING)
        wav = encode_wav(buffer)
        self._progress(PROGRESS_DONE)
        return wav

    def run(self, data: bytes) -> PipelineResult:
        """
        Run decode -> transform -> encode.

        Raises:
            DecodeError:     input could not be decoded.
            ProcessingError: anything else went wrong.
        """
        if self.state is not PipelineState.IDLE:
            raise ProcessingError(f"Pipeline already used (state={self.state.value})")

        try:
            source = self.decode(data)
        except DecodeError as exc:
            raise self._fail(exc)
        except Exception as exc:
            raise self._fail(ProcessingError(f"Decoding failed: {exc}")) from exc

        stage = "Input analysis"
        try:
            input_stats = analyze(source)
            stage = "Transform"
            processed = self.transform(source)
            del source
            stage = "Output analysis"
            output_stats = analyze(processed)
            stage = "Encoding"
            wav = self.encode(processed)
        except ProcessingError as exc:
            raise self._fail(exc)
        except Exception as exc:
            raise self._fail(ProcessingError(f"{stage} failed: {exc}")) from exc

        self._enter(PipelineState.DONE)
        logger.info(
            "[%s] Processed %.2fs -> %.2fs (%d bytes)",
            self.options.tool,
            input_stats["duration_s"],
            output_stats["duration_s"],
            len(wav),
        )
        return PipelineResult(
            wav_bytes=wav,
            tool=self.options.tool,
            input_stats=input_stats,
            output_stats=output_stats,
        )


def run_pipeline(
    data: bytes,
    options: ProcessOptions,
    on_progress: Optional[ProgressCallback] = None,
) -> PipelineResult:
    """Blocking convenience wrapper around AudioPipeline.run."""
    return AudioPipeline(options, on_progress).run(data)


async def run_pipeline_async(
    data: bytes,
    options: ProcessOptions,
    on_progress: Optional[ProgressCallback] = None,
) -> PipelineResult:
    """
    Run the pipeline off the event loop. Progress callbacks are delivered
    on the loop thread. Returns the result or raises DecodeError/ProcessingError.
    """
    loop = asyncio.get_running_loop()

    def _progress(percent: int) -> None:
        loop.call_soon_threadsafe(on_progress, percent)

    return await asyncio.to_thread(
        run_pipeline, data, options, _progress if on_progress is not None else None
    )


async def process_audio(
    data: bytes,
    options: ProcessOptions,
    on_progress: Optional[ProgressCallback],
    on_complete: Callable[[PipelineResult], None],
    on_error: Callable[[TouchupError], None],
) -> None:
    """
    Callback form of run_pipeline_async. Exactly one of on_complete/on_error is called.
    """
    try:
        result = await run_pipeline_async(data, options, on_progress)
    except TouchupError as exc:
        on_error(exc)
        return
    except Exception as exc:
        on_error(ProcessingError(f"Processing failed: {exc}"))
        return
    on_complete(result)
