"""
"Quality" enhancement: a gentle level boost with a very slow presence
modulation, then static soft compression above 0.7 to keep peaks bounded.
"""
import torch

from touchup.core.types import AudioBuffer
from touchup.dsp.dynamics import Dynamics

BOOSTS = {"light": 1.05, "medium": 1.1, "strong": 1.15}
PRESENCE_RATE = 0.0001  # radians per sample
PRESENCE_DEPTH = 0.05
BOOST_WEIGHT = 0.8
PRESENCE_WEIGHT = 0.2
COMPRESS_THRESHOLD = 0.7
COMPRESS_RATIO = 0.5


class QualityEnhancer:
    @staticmethod
    def boost_curve(frame_count: int, level: str = "medium") -> torch.Tensor:
        """Per-sample gain: boost * 0.8 + presence * 0.2 (float64)."""
        if level not in BOOSTS:
            raise ValueError(f"Unknown enhance level '{level}'. Allowed: {', '.join(BOOSTS)}")
        i = torch.arange(frame_count, dtype=torch.float64)
        presence = torch.sin(i * PRESENCE_RATE) * PRESENCE_DEPTH + 1.0
        return BOOSTS[level] * BOOST_WEIGHT + presence * PRESENCE_WEIGHT

    @staticmethod
    def process(buffer: AudioBuffer, level: str = "medium") -> AudioBuffer:
        curve = QualityEnhancer.boost_curve(buffer.frame_count, level)
        # same curve for every channel; boosted samples round to float32 before compressing
        boosted = (buffer.samples.double() * curve).to(torch.float32).double()
        compressed = Dynamics.soft_compress(boosted, COMPRESS_THRESHOLD, COMPRESS_RATIO)
        return AudioBuffer(compressed.to(torch.float32), buffer.sample_rate)
