from dataclasses import dataclass
from typing import Any, Dict, List, Literal, NamedTuple, Sequence

import torch

from touchup.core.errors import ProcessingError

ToolType = Literal["silence", "noise", "loudness", "quality"]
Level = Literal["light", "medium", "strong"]

TOOLS = ("silence", "noise", "loudness", "quality")
LEVELS = ("light", "medium", "strong")


@dataclass
class AudioBuffer:
    """
    Multi-channel float32 samples, shape (channels, frames), at a fixed rate.
    Values are nominally in [-1, 1] but may exceed it before encoding.
    """
    samples: torch.Tensor
    sample_rate: int

    def __post_init__(self):
        if not isinstance(self.samples, torch.Tensor):
            raise ProcessingError("AudioBuffer.samples must be a torch.Tensor")
        if self.samples.dim() != 2:
            raise ProcessingError(
                f"AudioBuffer.samples must be (channels, frames), got shape {tuple(self.samples.shape)}"
            )
        if self.samples.shape[0] < 1:
            raise ProcessingError("AudioBuffer needs at least one channel")
        if int(self.sample_rate) <= 0:
            raise ProcessingError(f"Invalid sample rate: {self.sample_rate}")
        self.sample_rate = int(self.sample_rate)
        if self.samples.dtype != torch.float32:
            self.samples = self.samples.to(torch.float32)

    @property
    def channel_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def frame_count(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return self.frame_count / self.sample_rate

    def clone(self) -> "AudioBuffer":
        """Fully independent copy (no shared storage)."""
        return AudioBuffer(self.samples.detach().clone(), self.sample_rate)

    @classmethod
    def from_channels(cls, channels: Sequence[Sequence[float]], sample_rate: int) -> "AudioBuffer":
        """
        Build a buffer from per-channel sample sequences.
        All channels must have the same length.
        """
        if len(channels) == 0:
            raise ProcessingError("AudioBuffer needs at least one channel")
        tensors: List[torch.Tensor] = [
            torch.as_tensor(ch, dtype=torch.float32).reshape(-1) for ch in channels
        ]
        lengths = {t.shape[0] for t in tensors}
        if len(lengths) != 1:
            raise ProcessingError(f"Mismatched channel lengths: {sorted(lengths)}")
        return cls(torch.stack(tensors).contiguous(), sample_rate)


class SilenceRegion(NamedTuple):
    """Half-open frame interval [start, end) in the source buffer."""
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass
class ProcessOptions:
    tool: ToolType
    aggression: int = 80
    noise_level: Level = "medium"
    target_lufs: float = -16.0
    enhance_level: Level = "medium"

    def params(self) -> Dict[str, Any]:
        """Only the parameter the selected tool reads."""
        if self.tool == "silence":
            return {"aggression": self.aggression}
        if self.tool == "noise":
            return {"noise_level": self.noise_level}
        if self.tool == "loudness":
            return {"target_lufs": self.target_lufs}
        if self.tool == "quality":
            return {"enhance_level": self.enhance_level}
        return {}
