"""
16-bit PCM WAV encoder.
Canonical 44-byte RIFF header, interleaved little-endian int16 payload.
Samples are clamped to [-1, 1]; negatives scale by 32768, the rest by 32767,
and the product is truncated toward zero.
"""
import struct

import numpy as np

from touchup.core.types import AudioBuffer

HEADER_SIZE = 44
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
PCM_FORMAT = 1
FMT_CHUNK_SIZE = 16

EXTENSION = "wav"


def wav_header(channel_count: int, sample_rate: int, frame_count: int) -> bytes:
    """Build the 44-byte RIFF/WAVE header for a PCM16 payload."""
    block_align = channel_count * BYTES_PER_SAMPLE
    byte_rate = sample_rate * block_align
    data_size = frame_count * block_align
    return struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        FMT_CHUNK_SIZE,
        PCM_FORMAT,
        channel_count,
        sample_rate,
        byte_rate,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )


def float_to_pcm16(samples: np.ndarray) -> np.ndarray:
    """Quantize float samples to int16 (asymmetric scale, truncation)."""
    x = np.nan_to_num(np.asarray(samples, dtype=np.float64), nan=0.0)
    x = np.clip(x, -1.0, 1.0)
    scaled = np.where(x < 0, x * 32768.0, x * 32767.0)
    return np.trunc(scaled).astype("<i2")


def encode_wav(buffer: AudioBuffer) -> bytes:
    """Serialize an AudioBuffer to WAV bytes (header + interleaved frames)."""
    data = buffer.samples.detach().cpu().numpy()
    # (channels, frames) -> frame-major interleave
    pcm = float_to_pcm16(data.T)
    header = wav_header(buffer.channel_count, buffer.sample_rate, buffer.frame_count)
    return header + np.ascontiguousarray(pcm).tobytes()
