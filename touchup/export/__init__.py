"""
WAV container encoding and download naming.
"""
from touchup.export.wav import encode_wav, wav_header
from touchup.export.naming import output_filename

__all__ = ["encode_wav", "wav_header", "output_filename"]
