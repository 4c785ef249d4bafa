"""Reinterpretation of integers between signed and unsigned two's complement forms."""

from __future__ import annotations


def _mask(bits: int) -> int:
    if bits <= 0:
        raise ValueError(f"bit width must be positive, got {bits}")
    return (1 << bits) - 1


def to_unsigned(value: int, bits: int) -> int:
    """Return the unsigned integer with the same low ``bits`` bits as ``value``."""
    return value & _mask(bits)


def to_signed(value: int, bits: int) -> int:
    """Return the two's complement signed reading of the low ``bits`` bits of ``value``."""
    unsigned = value & _mask(bits)
    if unsigned >> (bits - 1):
        return unsigned - (1 << bits)
    return unsigned