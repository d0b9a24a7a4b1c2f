"""
Soft noise gate with a per-channel noise-floor estimate.
Samples under the gate are pulled toward zero quadratically and scaled by 0.1;
samples at or above the gate pass through bit-for-bit.
"""
import math

import torch

from touchup.core.types import AudioBuffer

GATE_THRESHOLDS = {"light": 0.03, "medium": 0.015, "strong": 0.008}
FLOOR_PERCENTILE = 0.1
FALLBACK_FLOOR = 0.01
SUPPRESSION = 0.1


def _base_threshold(level: str) -> float:
    try:
        return GATE_THRESHOLDS[level]
    except KeyError:
        raise ValueError(
            f"Unknown noise level '{level}'. Allowed: {', '.join(GATE_THRESHOLDS)}"
        ) from None


class NoiseReducer:
    @staticmethod
    def noise_floor(channel: torch.Tensor) -> float:
        """10th-percentile absolute amplitude; FALLBACK_FLOOR when empty or zero."""
        n = channel.shape[-1]
        index = int(math.floor(n * FLOOR_PERCENTILE))
        if index >= n:
            return FALLBACK_FLOOR
        ordered, _ = torch.sort(torch.abs(channel.double()))
        floor = float(ordered[index])
        return floor or FALLBACK_FLOOR

    @staticmethod
    def gate_threshold(channel: torch.Tensor, level: str = "medium") -> float:
        return max(_base_threshold(level), NoiseReducer.noise_floor(channel) * 2.0)

    @staticmethod
    def process(buffer: AudioBuffer, level: str = "medium") -> AudioBuffer:
        """Gate each channel independently against its own floor estimate."""
        _base_threshold(level)
        out = torch.empty_like(buffer.samples)
        for c in range(buffer.channel_count):
            x = buffer.samples[c].double()
            gate = NoiseReducer.gate_threshold(x, level)
            magnitude = torch.abs(x)
            attenuated = x * (magnitude / gate) * SUPPRESSION
            out[c] = torch.where(magnitude < gate, attenuated, x).to(torch.float32)
        return AudioBuffer(out, buffer.sample_rate)
