"""Structured error types raised around the segmenter.

The segmenter itself never raises; these cover configuration and the
streaming boundary.
"""


class SegmenterError(Exception):
    """Base error for all agent-segmenter operations."""
    pass


class ConfigError(SegmenterError):
    """Raised when an explicitly requested config file cannot be used."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class StreamBusinessError(SegmenterError):
    """Raised when the stream reports a business error (rate limit, auth, ...)."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")
