"""
Loudness normalization against an RMS-based LUFS approximation, followed by
a tanh soft limiter at 0.95.

The mean square sums every channel but divides by the per-channel frame
count, so multichannel material reads louder than its true RMS. This is kept
as is; see DESIGN.md.
"""
import logging
import math

import torch

from touchup.core.types import AudioBuffer
from touchup.dsp.dynamics import Dynamics

logger = logging.getLogger("audio-touchup.dsp.loudness")

LUFS_OFFSET = -0.691
SILENT_MEAN_SQUARE = 0.0001
LIMIT_CEILING = 0.95


class LoudnessNormalizer:
    @staticmethod
    def mean_square(buffer: AudioBuffer) -> float:
        if buffer.frame_count == 0:
            return 0.0
        total = float(torch.sum(buffer.samples.double() ** 2))
        return total / buffer.frame_count

    @staticmethod
    def measure(buffer: AudioBuffer) -> float:
        """Approximate loudness in LUFS (not BS.1770)."""
        ms = LoudnessNormalizer.mean_square(buffer) or SILENT_MEAN_SQUARE
        return LUFS_OFFSET + 10.0 * math.log10(ms)

    @staticmethod
    def process(buffer: AudioBuffer, target_lufs: float = -16.0) -> AudioBuffer:
        current = LoudnessNormalizer.measure(buffer)
        gain_db = float(target_lufs) - current
        gain = Dynamics.db_to_gain(gain_db)
        logger.debug("Loudness %.2f LUFS -> %.2f LUFS (gain %.2f dB)", current, target_lufs, gain_db)

        x = buffer.samples.double() * gain
        x = Dynamics.soft_limit(x, LIMIT_CEILING)
        return AudioBuffer(x.to(torch.float32), buffer.sample_rate)
