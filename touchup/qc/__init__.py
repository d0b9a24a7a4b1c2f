"""
Quality report for processed audio.
"""
from touchup.qc.qc import analyze

__all__ = ["analyze"]
