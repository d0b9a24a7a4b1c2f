"""
Transform strategies, one per tool, selected by tool id.
Each maps (AudioBuffer, ProcessOptions) -> new AudioBuffer.
"""
from typing import Callable, Dict

from touchup.core.types import AudioBuffer, ProcessOptions
from touchup.dsp.silence import SilenceRemover
from touchup.dsp.gate import NoiseReducer
from touchup.dsp.loudness import LoudnessNormalizer
from touchup.dsp.enhance import QualityEnhancer

Transform = Callable[[AudioBuffer, ProcessOptions], AudioBuffer]

TRANSFORMS: Dict[str, Transform] = {
    "silence": lambda buf, opts: SilenceRemover.process(buf, opts.aggression),
    "noise": lambda buf, opts: NoiseReducer.process(buf, opts.noise_level),
    "loudness": lambda buf, opts: LoudnessNormalizer.process(buf, opts.target_lufs),
    "quality": lambda buf, opts: QualityEnhancer.process(buf, opts.enhance_level),
}


def get_transform(tool: str) -> Transform:
    if tool not in TRANSFORMS:
        raise ValueError(f"Unknown tool '{tool}'. Allowed: {', '.join(TRANSFORMS)}")
    return TRANSFORMS[tool]


def apply_transform(buffer: AudioBuffer, options: ProcessOptions) -> AudioBuffer:
    return get_transform(options.tool)(buffer, options)


__all__ = [
    "SilenceRemover",
    "NoiseReducer",
    "LoudnessNormalizer",
    "QualityEnhancer",
    "TRANSFORMS",
    "get_transform",
    "apply_transform",
]
