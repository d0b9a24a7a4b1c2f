"""
Loudness normalizer: approximate LUFS measurement, gain, soft limiter bound.
Run from project root: python -m pytest tests/test_loudness.py -v
"""
import sys
import os
import io
import math

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import numpy as np
import pytest
import soundfile as sf
import torch

from touchup.core.types import AudioBuffer
from touchup.dsp.loudness import LoudnessNormalizer
from touchup.export.wav import encode_wav

SR = 48000


def _impulse(n: int = 100, amp: float = 1.0) -> AudioBuffer:
    x = torch.zeros(1, n)
    x[0, 0] = amp
    return AudioBuffer(x, SR)


# -----------------------------------------------------------------------------
# Measurement
# -----------------------------------------------------------------------------

def test_full_scale_measures_offset():
    buf = AudioBuffer(torch.ones(1, 1000), SR)
    assert LoudnessNormalizer.measure(buf) == pytest.approx(-0.691)


def test_mean_square_divides_by_frames_not_samples():
    """Stereo sums both channels over the per-channel frame count."""
    buf = AudioBuffer(torch.full((2, 1000), 0.5), SR)
    assert LoudnessNormalizer.mean_square(buf) == pytest.approx(0.5)
    assert LoudnessNormalizer.measure(buf) == pytest.approx(-0.691 + 10 * math.log10(0.5))


def test_silence_uses_floor():
    buf = AudioBuffer(torch.zeros(1, 1000), SR)
    assert LoudnessNormalizer.measure(buf) == pytest.approx(-40.691)


def test_empty_buffer_measures_floor():
    buf = AudioBuffer(torch.zeros(2, 0), SR)
    assert LoudnessNormalizer.measure(buf) == pytest.approx(-40.691)
    assert LoudnessNormalizer.process(buf, -16).frame_count == 0


# -----------------------------------------------------------------------------
# Gain + limiter
# -----------------------------------------------------------------------------

def test_gain_below_ceiling_is_linear():
    buf = AudioBuffer(torch.ones(1, 1000), SR)
    out = LoudnessNormalizer.process(buf, -10.0)
    gain = 10 ** ((-10.0 + 0.691) / 20)
    torch.testing.assert_close(out.samples, torch.full((1, 1000), gain))


def test_all_ones_stays_within_full_scale_after_encoding():
    buf = AudioBuffer(torch.ones(2, 4000), SR)
    out = LoudnessNormalizer.process(buf, -10.0)
    decoded, _ = sf.read(io.BytesIO(encode_wav(out)), dtype="float32")
    assert np.max(np.abs(decoded)) <= 1.0


def test_soft_limiter_bounds_hot_peaks():
    out = LoudnessNormalizer.process(_impulse(), -16.0)
    # mean square 1e-2 -> -20.691 LUFS -> +4.691 dB of gain
    gain = 10 ** (4.691 / 20)
    peak = float(out.samples[0, 0])
    assert peak == pytest.approx(0.95 + math.tanh(gain - 0.95), rel=1e-6)
    assert peak < 1.95
    decoded, _ = sf.read(io.BytesIO(encode_wav(out)), dtype="int16")
    assert int(decoded[0]) == 32767


def test_soft_limiter_is_symmetric():
    pos = LoudnessNormalizer.process(_impulse(amp=1.0), -12.0).samples
    neg = LoudnessNormalizer.process(_impulse(amp=-1.0), -12.0).samples
    torch.testing.assert_close(neg, -pos)


def test_any_target_stays_below_limit():
    gen = torch.Generator().manual_seed(3)
    buf = AudioBuffer(torch.randn(2, 8000, generator=gen) * 0.05, SR)
    for target in (-24.0, -16.0, -10.0, 0.0):
        out = LoudnessNormalizer.process(buf, target)
        assert float(out.samples.abs().max()) < 1.95
        assert out.samples.shape == buf.samples.shape


def test_silence_stays_silent():
    out = LoudnessNormalizer.process(AudioBuffer(torch.zeros(1, 500), SR), -10.0)
    assert float(out.samples.abs().max()) == 0.0


def test_not_idempotent():
    """Limiting changes loudness, so a second pass applies more gain; expected."""
    x = torch.full((1, 100), 0.1)
    x[0, 0] = 1.0
    once = LoudnessNormalizer.process(AudioBuffer(x, SR), -10.0)
    # only the first sample hits the limiter
    assert float(once.samples[0, 0]) > 0.95
    assert float(once.samples[0, 1]) < 0.95
    twice = LoudnessNormalizer.process(once, -10.0)
    assert not torch.allclose(once.samples, twice.samples)
