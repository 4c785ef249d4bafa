"""Resampler error codes, the exception that carries them, and quality limits."""

from __future__ import annotations

from enum import IntEnum

QUALITY_MAX = 10
QUALITY_MIN = 0
QUALITY_DEFAULT = 4
QUALITY_VOIP = 3
QUALITY_DESKTOP = 5

_UNKNOWN_MESSAGE = "Unknown error. Bad error code or strange version mismatch."


class ErrorCode(IntEnum):
    """Status codes reported by the resampler."""

    SUCCESS = 0
    ALLOC_FAILED = 1
    BAD_STATE = 2
    INVALID_ARG = 3
    PTR_OVERLAP = 4

    @property
    def message(self) -> str:
        """The English meaning of the code."""
        return _MESSAGES[self]


_MESSAGES = {
    ErrorCode.SUCCESS: "Success.",
    ErrorCode.ALLOC_FAILED: "Memory allocation failed.",
    ErrorCode.BAD_STATE: "Bad resampler state.",
    ErrorCode.INVALID_ARG: "Invalid argument.",
    ErrorCode.PTR_OVERLAP: "Input and output buffers overlap.",
}


def _describe(code: int) -> str:
    try:
        return ErrorCode(code).message
    except ValueError:
        return _UNKNOWN_MESSAGE


class ResamplerError(Exception):
    """Raised when the resampler reports a failure; ``code`` holds the status."""

    def __init__(self, code: int) -> None:
        try:
            self.code: int = ErrorCode(code)
        except ValueError:
            self.code = int(code)
        super().__init__(_describe(self.code))

    @property
    def message(self) -> str:
        return _describe(self.code)


def check_quality(quality: int) -> int:
    """Return ``quality`` if it lies between the minimum and maximum, else raise."""
    if not QUALITY_MIN <= quality <= QUALITY_MAX:
        raise ResamplerError(ErrorCode.INVALID_ARG)
    return quality