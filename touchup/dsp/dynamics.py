"""
Amplitude shaping shared by the loudness and enhancement tools.
Work on float64 tensors; callers cast back to float32.
"""
import torch


class Dynamics:
    @staticmethod
    def db_to_gain(db: float) -> float:
        return 10.0 ** (db / 20.0)

    @staticmethod
    def soft_limit(waveform: torch.Tensor, ceiling: float = 0.95) -> torch.Tensor:
        """
        Tanh knee above +/-ceiling; values inside the ceiling pass untouched.
        Output magnitude stays below ceiling + 1.
        """
        out = waveform.clone()
        over = waveform > ceiling
        under = waveform < -ceiling
        out[over] = ceiling + torch.tanh(waveform[over] - ceiling)
        out[under] = -ceiling - torch.tanh(-ceiling - waveform[under])
        return out

    @staticmethod
    def soft_compress(waveform: torch.Tensor, threshold: float = 0.7, ratio: float = 0.5) -> torch.Tensor:
        """
        Static compression of the portion above threshold.
        ratio is the slope above the knee (0.5 halves the excess).
        """
        magnitude = torch.abs(waveform)
        compressed = torch.sign(waveform) * (threshold + (magnitude - threshold) * ratio)
        return torch.where(magnitude > threshold, compressed, waveform)
