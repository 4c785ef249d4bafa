"""Inner resampling loops that turn buffered input into output samples.

Each kernel reads one channel's buffered input starting at the channel's
current position. It produces at most ``out_len`` samples and stops once the
position reaches ``in_len``. It returns the samples it produced and updates
the channel's position in place.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from .errors import check_quality
from .sinc import cubic_coef

_U32_MASK = 0xFFFFFFFF


@dataclass
class ChannelState:
    """Per-channel progress through the input stream."""

    last_sample: int = 0
    samp_frac_num: int = 0
    magic_samples: int = 0


@dataclass
class Filter:
    """Filter parameters and the sinc table that the kernels read from.

    For the direct kernels the table holds ``den_rate`` rows of ``filt_len``
    taps. For the interpolating kernels it holds ``filt_len * oversample + 8``
    points, with four guard points on each side.
    """

    filt_len: int
    den_rate: int
    int_advance: int
    frac_advance: int
    oversample: int = 1
    sinc_table: list[float] = field(default_factory=list)


Kernel = Callable[[Filter, ChannelState, Sequence[float], int, int], list[float]]


def _positions(filt: Filter, channel: ChannelState, in_len: int, out_len: int):
    """Yield (last_sample, samp_frac_num) for each output sample, then store the state."""
    last_sample = channel.last_sample
    samp_frac_num = channel.samp_frac_num
    produced = 0
    try:
        while last_sample < in_len and produced < out_len:
            yield last_sample, samp_frac_num
            produced += 1
            last_sample += filt.int_advance
            samp_frac_num = (samp_frac_num + filt.frac_advance) & _U32_MASK
            if samp_frac_num >= filt.den_rate:
                samp_frac_num -= filt.den_rate
                last_sample += 1
    finally:
        channel.last_sample = last_sample
        channel.samp_frac_num = samp_frac_num


def direct_single(
    filt: Filter, channel: ChannelState, samples: Sequence[float], in_len: int, out_len: int
) -> list[float]:
    """Apply the filter row picked by the phase, with one running sum."""
    n = filt.filt_len
    table = filt.sinc_table
    out: list[float] = []
    for last_sample, frac in _positions(filt, channel, in_len, out_len):
        row = table[frac * n : frac * n + n]
        window = samples[last_sample : last_sample + n]
        out.append(sum(tap * x for tap, x in zip(row, window)))
    return out


def direct_double(
    filt: Filter, channel: ChannelState, samples: Sequence[float], in_len: int, out_len: int
) -> list[float]:
    """Apply the filter row picked by the phase, with four interleaved sums."""
    n = filt.filt_len
    table = filt.sinc_table
    out: list[float] = []
    for last_sample, frac in _positions(filt, channel, in_len, out_len):
        row = table[frac * n : frac * n + n]
        window = samples[last_sample : last_sample + n]
        products = [tap * x for tap, x in zip(row, window)]
        accum = [sum(products[k::4]) for k in range(4)]
        out.append(accum[0] + accum[1] + accum[2] + accum[3])
    return out


def _interpolate(
    filt: Filter, channel: ChannelState, samples: Sequence[float], in_len: int, out_len: int
) -> list[float]:
    n = filt.filt_len
    oversample = filt.oversample
    table = filt.sinc_table
    out: list[float] = []
    for last_sample, frac_num in _positions(filt, channel, in_len, out_len):
        scaled = (frac_num * oversample) & _U32_MASK
        offset = scaled // filt.den_rate
        frac = (scaled % filt.den_rate) / filt.den_rate
        accum = [0.0, 0.0, 0.0, 0.0]
        window = samples[last_sample : last_sample + n]
        for j, curr_in in enumerate(window):
            base = 4 + (j + 1) * oversample - offset - 2
            for k in range(4):
                accum[k] += curr_in * table[base + k]
        interp = cubic_coef(frac)
        out.append(sum(w * a for w, a in zip(interp, accum)))
    return out


def interpolate_single(
    filt: Filter, channel: ChannelState, samples: Sequence[float], in_len: int, out_len: int
) -> list[float]:
    """Filter with taps interpolated cubically from an oversampled sinc table."""
    return _interpolate(filt, channel, samples, in_len, out_len)


def interpolate_double(
    filt: Filter, channel: ChannelState, samples: Sequence[float], in_len: int, out_len: int
) -> list[float]:
    """Interpolating filter used at the highest qualities."""
    return _interpolate(filt, channel, samples, in_len, out_len)


def zero_kernel(
    filt: Filter, channel: ChannelState, samples: Sequence[float], in_len: int, out_len: int
) -> list[float]:
    """Produce silence while consuming input at the usual pace."""
    return [0.0 for _ in _positions(filt, channel, in_len, out_len)]


def select_kernel(quality: int, use_direct: bool) -> Kernel:
    """Pick the kernel for a quality level and table layout."""
    check_quality(quality)
    if use_direct:
        return direct_double if quality > 8 else direct_single
    return interpolate_double if quality > 8 else interpolate_single