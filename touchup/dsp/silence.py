"""
Silence removal: splice out sustained quiet stretches.

A frame is silent when its peak across channels is below a threshold derived
from aggression. A silent run is cut only when a loud frame closes it and it
lasts at least MIN_SILENCE_SECONDS. A run still open at the end of the buffer
is kept.
"""
import logging
from typing import List

import torch

from touchup.core.types import AudioBuffer, SilenceRegion

logger = logging.getLogger("audio-touchup.dsp.silence")

MIN_SILENCE_SECONDS = 0.15
BASE_THRESHOLD = 0.001
THRESHOLD_SPAN = 0.05


def silence_threshold(aggression: float) -> float:
    """Amplitude below which a frame counts as silent. Higher aggression -> lower threshold."""
    aggression = min(max(float(aggression), 0.0), 100.0)
    return BASE_THRESHOLD + ((100.0 - aggression) / 100.0) * THRESHOLD_SPAN


def min_silence_frames(sample_rate: int) -> int:
    return int(sample_rate * MIN_SILENCE_SECONDS)


class SilenceRemover:
    @staticmethod
    def find_regions(buffer: AudioBuffer, aggression: float = 80) -> List[SilenceRegion]:
        """Silent runs that qualify for removal, in order, as half-open frame ranges."""
        n = buffer.frame_count
        if n == 0:
            return []

        threshold = silence_threshold(aggression)
        min_frames = min_silence_frames(buffer.sample_rate)

        frame_peak = torch.abs(buffer.samples).amax(dim=0).double()
        silent = (frame_peak < threshold).to(torch.int8)

        # Pad with a loud frame on the left only; a run touching the end has no closing edge.
        edges = torch.diff(silent, prepend=torch.zeros(1, dtype=torch.int8))
        starts = torch.nonzero(edges == 1).flatten().tolist()
        ends = torch.nonzero(edges == -1).flatten().tolist()

        regions: List[SilenceRegion] = []
        for start, end in zip(starts, ends):
            if end - start >= min_frames:
                regions.append(SilenceRegion(start, end))
        return regions

    @staticmethod
    def process(buffer: AudioBuffer, aggression: float = 80) -> AudioBuffer:
        """Return a new buffer with every qualifying silent region removed from all channels."""
        regions = SilenceRemover.find_regions(buffer, aggression)
        if not regions:
            return buffer.clone()

        keep = torch.ones(buffer.frame_count, dtype=torch.bool)
        for region in regions:
            keep[region.start:region.end] = False

        removed = sum(r.length for r in regions)
        logger.debug(
            "Removing %d silent regions (%d frames, %.3fs)",
            len(regions), removed, removed / buffer.sample_rate,
        )
        # boolean indexing copies
        return AudioBuffer(buffer.samples[:, keep].contiguous(), buffer.sample_rate)
