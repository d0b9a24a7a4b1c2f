"""
Quality report for a buffer before/after processing.
Peak, RMS, crest factor, approximate loudness and clipping counts.
"""
from typing import Dict

import numpy as np
import torch

from touchup.core.types import AudioBuffer
from touchup.dsp.loudness import LoudnessNormalizer

CLIP_LEVEL = 1.0


def _db(x: float) -> float:
    """Convert linear to dB."""
    if x <= 0:
        return -np.inf
    return 20.0 * np.log10(abs(x))


def _dbfs(x: float) -> float:
    """Convert linear amplitude to dBFS (full scale)."""
    return _db(x)


def analyze(buffer: AudioBuffer) -> Dict:
    """
    Summarize a buffer.

    Returns:
        Dict with shape info and level metrics. Empty buffers report
        zero levels (-inf dBFS).
    """
    audio = buffer.samples.double()
    if buffer.frame_count == 0:
        peak = 0.0
        rms = 0.0
        clipped = 0
    else:
        peak = float(torch.max(torch.abs(audio)))
        rms = float(torch.sqrt(torch.mean(audio ** 2)))
        clipped = int(torch.sum(torch.abs(audio) > CLIP_LEVEL))

    return {
        "channels": buffer.channel_count,
        "sample_rate": buffer.sample_rate,
        "frames": buffer.frame_count,
        "duration_s": buffer.duration,
        "peak_linear": peak,
        "peak_dbfs": _dbfs(peak),
        "rms_linear": rms,
        "rms_dbfs": _dbfs(rms),
        "crest_factor": peak / (rms + 1e-12),
        "approx_lufs": LoudnessNormalizer.measure(buffer),
        "clipped_samples": clipped,
    }
