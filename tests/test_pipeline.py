"""
Pipeline orchestrator: end-to-end runs, progress milestones, error channel,
async and callback forms, concurrent runs.
Run from project root: python -m pytest tests/test_pipeline.py -v
"""
import sys
import os
import io
import asyncio
import math

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
import soundfile as sf
import torch

import touchup.dsp as dsp
from touchup.core.errors import DecodeError, ProcessingError
from touchup.core.types import AudioBuffer, ProcessOptions
from touchup.dsp.silence import SilenceRemover
from touchup.export.wav import encode_wav
from touchup.pipeline import (
    AudioPipeline,
    PipelineState,
    process_audio,
    run_pipeline,
    run_pipeline_async,
)

SR = 44100


def _half_silence_half_tone() -> AudioBuffer:
    """1 s mono: 0.5 s of zeros, then 0.5 s of 440 Hz at 0.8."""
    half = SR // 2
    t = torch.arange(half, dtype=torch.float64) / SR
    tone = (0.8 * torch.sin(2 * math.pi * 440.0 * t)).float()
    return AudioBuffer(torch.cat([torch.zeros(half), tone]).view(1, -1), SR)


def _wav_input(channels: int = 2, frames: int = 4410, amp: float = 0.3) -> bytes:
    t = torch.arange(frames, dtype=torch.float64) / SR
    tone = (amp * torch.sin(2 * math.pi * 220.0 * t)).float()
    return encode_wav(AudioBuffer(tone.repeat(channels, 1), SR))


# -----------------------------------------------------------------------------
# End-to-end scenario
# -----------------------------------------------------------------------------

def test_silence_then_tone_keeps_only_tone():
    buf = _half_silence_half_tone()
    out = SilenceRemover.process(buf, 80)
    assert abs(out.frame_count - 22050) <= 2
    wav = encode_wav(out)
    assert len(wav) == 44 + out.frame_count * 2
    data, sr = sf.read(io.BytesIO(wav), dtype="float32")
    assert sr == SR
    assert data.shape[0] == out.frame_count


def test_pipeline_silence_end_to_end():
    data = encode_wav(_half_silence_half_tone())
    progress = []
    result = run_pipeline(data, ProcessOptions(tool="silence", aggression=80), progress.append)
    assert progress == [10, 30, 70, 100]
    assert result.tool == "silence"
    assert abs(result.output_stats["frames"] - 22050) <= 2
    assert len(result.wav_bytes) == 44 + result.output_stats["frames"] * 2
    assert result.input_stats["frames"] == SR


@pytest.mark.parametrize("tool", ["silence", "noise", "loudness", "quality"])
def test_every_tool_preserves_channels_and_rate(tool):
    pipeline = AudioPipeline(ProcessOptions(tool=tool))
    result = pipeline.run(_wav_input())
    assert pipeline.state is PipelineState.DONE
    data, sr = sf.read(io.BytesIO(result.wav_bytes), always_2d=True)
    assert sr == SR
    assert data.shape[1] == 2
    assert result.output_stats["channels"] == result.input_stats["channels"] == 2
    assert result.output_stats["frames"] <= result.input_stats["frames"]


# -----------------------------------------------------------------------------
# Error channel
# -----------------------------------------------------------------------------

def test_garbage_input_is_decode_error():
    progress = []
    pipeline = AudioPipeline(ProcessOptions(tool="noise"), on_progress=progress.append)
    with pytest.raises(DecodeError):
        pipeline.run(b"definitely not audio" * 10)
    assert pipeline.state is PipelineState.FAILED
    assert isinstance(pipeline.error, DecodeError)
    assert progress == [10]


def test_empty_input_is_decode_error():
    with pytest.raises(DecodeError):
        run_pipeline(b"", ProcessOptions(tool="silence"))


def test_transform_failure_is_processing_error(monkeypatch):
    def boom(buffer, options):
        raise RuntimeError("kaboom")

    monkeypatch.setitem(dsp.TRANSFORMS, "noise", boom)
    pipeline = AudioPipeline(ProcessOptions(tool="noise"))
    with pytest.raises(ProcessingError) as excinfo:
        pipeline.run(_wav_input())
    assert pipeline.state is PipelineState.FAILED
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert "kaboom" in str(excinfo.value)


def test_analysis_failure_names_its_stage(monkeypatch):
    def broken_analyze(buffer):
        raise RuntimeError("no stats")

    monkeypatch.setattr("touchup.pipeline.analyze", broken_analyze)
    pipeline = AudioPipeline(ProcessOptions(tool="loudness"))
    with pytest.raises(ProcessingError) as excinfo:
        pipeline.run(_wav_input())
    assert pipeline.state is PipelineState.FAILED
    assert str(excinfo.value).startswith("Input analysis failed")
    assert "Decoding" not in str(excinfo.value)


def test_transform_changing_channel_count_is_rejected(monkeypatch):
    def downmix(buffer, options):
        return AudioBuffer(buffer.samples.mean(dim=0, keepdim=True), buffer.sample_rate)

    monkeypatch.setitem(dsp.TRANSFORMS, "quality", downmix)
    with pytest.raises(ProcessingError):
        run_pipeline(_wav_input(channels=2), ProcessOptions(tool="quality"))


def test_unknown_level_is_processing_error():
    with pytest.raises(ProcessingError):
        run_pipeline(_wav_input(), ProcessOptions(tool="noise", noise_level="extreme"))


def test_pipeline_is_single_shot():
    pipeline = AudioPipeline(ProcessOptions(tool="loudness"))
    pipeline.run(_wav_input())
    with pytest.raises(ProcessingError):
        pipeline.run(_wav_input())


# -----------------------------------------------------------------------------
# Async / callbacks
# -----------------------------------------------------------------------------

def test_async_run_reports_progress():
    progress = []
    result = asyncio.run(
        run_pipeline_async(_wav_input(), ProcessOptions(tool="quality"), progress.append)
    )
    assert progress == [10, 30, 70, 100]
    assert result.wav_bytes[:4] == b"RIFF"


def test_callbacks_complete():
    completed, errors = [], []
    asyncio.run(
        process_audio(
            _wav_input(), ProcessOptions(tool="loudness"), None, completed.append, errors.append
        )
    )
    assert len(completed) == 1 and errors == []
    assert completed[0].tool == "loudness"


def test_callbacks_error():
    completed, errors = [], []
    asyncio.run(
        process_audio(b"\x00" * 64, ProcessOptions(tool="silence"), None, completed.append, errors.append)
    )
    assert completed == []
    assert len(errors) == 1 and isinstance(errors[0], DecodeError)


def test_concurrent_runs_are_independent():
    async def both():
        return await asyncio.gather(
            run_pipeline_async(_wav_input(amp=0.3), ProcessOptions(tool="loudness", target_lufs=-20.0)),
            run_pipeline_async(_wav_input(amp=0.3), ProcessOptions(tool="quality")),
        )

    loud, quality = asyncio.run(both())
    solo = run_pipeline(_wav_input(amp=0.3), ProcessOptions(tool="loudness", target_lufs=-20.0))
    loud_pcm, _ = sf.read(io.BytesIO(loud.wav_bytes), dtype="int16")
    solo_pcm, _ = sf.read(io.BytesIO(solo.wav_bytes), dtype="int16")
    assert loud_pcm.shape == solo_pcm.shape
    assert abs(loud_pcm.astype(int) - solo_pcm.astype(int)).max() <= 1
    assert quality.wav_bytes != loud.wav_bytes
