"""
Error taxonomy for the touch-up pipeline.
Every failed run surfaces exactly one of these to the caller.
"""


class TouchupError(Exception):
    """Base class for pipeline failures."""
    pass


class DecodeError(TouchupError):
    """Raised when input bytes cannot be decoded as audio (unsupported or corrupt)."""
    pass


class ProcessingError(TouchupError):
    """Raised on any unexpected failure during transform or encode."""
    pass
