import io
import os
from typing import Union

import soundfile as sf
import torch

from touchup.core.errors import DecodeError
from touchup.core.types import AudioBuffer
from touchup.export.wav import encode_wav


class AudioIO:
    @staticmethod
    def decode(data: bytes) -> AudioBuffer:
        """
        Decode an opaque audio byte stream (any format libsndfile reads) into an AudioBuffer.
        Raises DecodeError for empty, unsupported or corrupt input.
        """
        if not data:
            raise DecodeError("Audio input is empty.")
        try:
            samples, sample_rate = sf.read(io.BytesIO(data), dtype="float32", always_2d=True)
        except Exception as exc:
            raise DecodeError(f"Audio could not be decoded: {exc}") from exc

        # soundfile gives (frames, channels)
        tensor = torch.from_numpy(samples.T.copy())
        if tensor.shape[0] < 1:
            raise DecodeError("Decoded audio has no channels.")
        return AudioBuffer(tensor, sample_rate)

    @staticmethod
    def load(path: Union[str, os.PathLike]) -> AudioBuffer:
        """Decode an audio file from disk."""
        with open(path, "rb") as f:
            return AudioIO.decode(f.read())

    @staticmethod
    def save_wav(buffer: AudioBuffer, path: Union[str, os.PathLike]) -> None:
        """Writes the buffer to a 16-bit PCM WAV file."""
        with open(path, "wb") as f:
            f.write(encode_wav(buffer))
