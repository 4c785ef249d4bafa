"""Streaming sample-rate converter built on a windowed-sinc filter.

Each channel keeps its own history, so a stream can be fed in pieces of any
size and the output is the same as if it had been fed in one go.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import NoReturn, TypeVar

from .bitcast import to_signed
from .errors import QUALITY_DEFAULT, ErrorCode, ResamplerError, check_quality
from .kernels import ChannelState, Filter, Kernel, select_kernel, zero_kernel
from .sinc import QUALITY_MAP, sinc, word_to_int

_U32 = 0xFFFFFFFF
_INT_MAX = 2**31 - 1
_WORD_SIZE = 4
_BUFFER_SIZE = 160
_OUT_CHUNK = 1024

_S = TypeVar("_S")


def strerror(err: int) -> str:
    """Return the English meaning of a resampler status code."""
    return ResamplerError(err).message


class Resampler:
    """Converts one or more channels of audio between two sampling rates."""

    def __init__(
        self, channels: int, in_rate: int, out_rate: int, quality: int = QUALITY_DEFAULT
    ) -> None:
        self._setup(channels, in_rate, out_rate, in_rate, out_rate, quality)

    @classmethod
    def from_ratio(
        cls,
        channels: int,
        ratio_num: int,
        ratio_den: int,
        in_rate: int,
        out_rate: int,
        quality: int = QUALITY_DEFAULT,
    ) -> Resampler:
        """Create a resampler whose rate ratio is an arbitrary fraction."""
        resampler = cls.__new__(cls)
        resampler._setup(channels, ratio_num, ratio_den, in_rate, out_rate, quality)
        return resampler

    def _setup(
        self,
        channels: int,
        ratio_num: int,
        ratio_den: int,
        in_rate: int,
        out_rate: int,
        quality: int,
    ) -> None:
        check_quality(quality)
        if channels < 1:
            raise ResamplerError(ErrorCode.INVALID_ARG)
        self._channels = channels
        self._initialised = False
        self._started = False
        self._in_rate = 0
        self._out_rate = 0
        self._num_rate = 0
        self._den_rate = 0
        self._quality = -1
        self._mem_alloc_size = 0
        self._cutoff = 1.0
        self._state = [ChannelState() for _ in range(channels)]
        self._mem: list[list[float]] = [[] for _ in range(channels)]
        self._filter = Filter(filt_len=0, den_rate=0, int_advance=0, frac_advance=0)
        self._kernel: Kernel = zero_kernel

        self.set_quality(quality)
        self.set_rate_frac(ratio_num, ratio_den, in_rate, out_rate)
        self._update_filter()
        self._initialised = True

    # ------------------------------------------------------------------
    # Filter construction

    def _fail(
        self, old_length: int, den: int, int_advance: int, frac_advance: int, oversample: int
    ) -> NoReturn:
        # Keep the old length so the buffered history still lines up.
        self._filter = Filter(
            filt_len=old_length,
            den_rate=den,
            int_advance=int_advance,
            frac_advance=frac_advance,
            oversample=oversample,
            sinc_table=self._filter.sinc_table,
        )
        self._kernel = zero_kernel
        raise ResamplerError(ErrorCode.ALLOC_FAILED)

    def _update_filter(self) -> None:
        old_length = self._filter.filt_len
        mapping = QUALITY_MAP[self._quality]
        num, den = self._num_rate, self._den_rate
        int_advance, frac_advance = divmod(num, den)
        oversample = mapping.oversample
        filt_len = mapping.base_length

        if num > den:
            self._cutoff = mapping.downsample_bandwidth * den / num
            filt_len = ((filt_len * num) & _U32) // den
            # Round up to a multiple of 8.
            filt_len = ((((filt_len - 1) & _U32) & ~0x7) + 8) & _U32
            for factor in (2, 4, 8, 16):
                if (factor * den) & _U32 < num:
                    oversample >>= 1
            oversample = max(oversample, 1)
        else:
            self._cutoff = mapping.upsample_bandwidth

        use_direct = (
            (filt_len * den) & _U32 <= (filt_len * oversample + 8) & _U32
            and _INT_MAX // _WORD_SIZE // den >= filt_len
        )
        if not use_direct and (_INT_MAX // _WORD_SIZE - 8) // oversample < filt_len:
            self._fail(old_length, den, int_advance, frac_advance, oversample)

        window = mapping.window_func
        cutoff = self._cutoff
        half = filt_len // 2
        if use_direct:
            table = [
                sinc(cutoff, (j - half + 1) - i / den, filt_len, window)
                for i in range(den)
                for j in range(filt_len)
            ]
        else:
            table = [
                sinc(cutoff, i / oversample - half, filt_len, window)
                for i in range(-4, oversample * filt_len + 4)
            ]
        kernel = select_kernel(self._quality, use_direct)

        min_alloc = (filt_len - 1 + _BUFFER_SIZE) & _U32
        if min_alloc > self._mem_alloc_size:
            if _INT_MAX // _WORD_SIZE // self._channels < min_alloc:
                self._fail(old_length, den, int_advance, frac_advance, oversample)
            for buf in self._mem:
                buf.extend([0.0] * (min_alloc - len(buf)))
            self._mem_alloc_size = min_alloc

        self._filter = Filter(
            filt_len=filt_len,
            den_rate=den,
            int_advance=int_advance,
            frac_advance=frac_advance,
            oversample=oversample,
            sinc_table=table,
        )
        self._kernel = kernel

        if not self._started:
            for buf in self._mem:
                buf[:] = [0.0] * self._mem_alloc_size
        elif filt_len > old_length:
            for buf, state in zip(self._mem, self._state):
                _grow_history(buf, state, old_length, filt_len)
        elif filt_len < old_length:
            for buf, state in zip(self._mem, self._state):
                _shrink_history(buf, state, old_length, filt_len)

    # ------------------------------------------------------------------
    # Processing

    def _check_channel(self, channel: int) -> None:
        if not 0 <= channel < self._channels:
            raise IndexError(f"channel {channel} out of range 0..{self._channels - 1}")

    def _check_kernel(self) -> None:
        if self._kernel is zero_kernel:
            raise ResamplerError(ErrorCode.ALLOC_FAILED)

    def _process_native(self, channel: int, in_len: int, out_len: int) -> tuple[int, list[float]]:
        filt = self._filter
        n = filt.filt_len
        mem = self._mem[channel]
        state = self._state[channel]
        self._started = True

        out = self._kernel(filt, state, mem, in_len, out_len)
        if state.last_sample < in_len:
            in_len = state.last_sample
        state.last_sample -= in_len
        if n > 1:
            mem[: n - 1] = mem[in_len : in_len + n - 1]
        return in_len, out

    def _magic(self, channel: int, out_len: int) -> list[float]:
        state = self._state[channel]
        mem = self._mem[channel]
        n = self._filter.filt_len
        consumed, out = self._process_native(channel, state.magic_samples, out_len)
        state.magic_samples -= consumed
        remaining = state.magic_samples
        if remaining:
            # Keep the unprocessed samples for the next call.
            start = n - 1
            mem[start : start + remaining] = mem[start + consumed : start + consumed + remaining]
        return out

    def _run_float(
        self, channel: int, samples: Sequence[float], out_len: int
    ) -> tuple[int, list[float]]:
        state = self._state[channel]
        x = self._mem[channel]
        filt_offs = self._filter.filt_len - 1
        xlen = self._mem_alloc_size - filt_offs
        remaining_in = len(samples)
        remaining_out = out_len
        pos = 0
        out: list[float] = []

        if state.magic_samples:
            produced = self._magic(channel, remaining_out)
            out.extend(produced)
            remaining_out -= len(produced)
        if not state.magic_samples:
            while remaining_in > 0 and remaining_out > 0:
                ichunk = min(remaining_in, xlen)
                x[filt_offs : filt_offs + ichunk] = samples[pos : pos + ichunk]
                consumed, produced = self._process_native(channel, ichunk, remaining_out)
                remaining_in -= consumed
                remaining_out -= len(produced)
                pos += consumed
                out.extend(produced)
        return pos, out

    def _run_int(self, channel: int, samples: Sequence[float], out_len: int) -> tuple[int, list[int]]:
        state = self._state[channel]
        x = self._mem[channel]
        filt_offs = self._filter.filt_len - 1
        xlen = self._mem_alloc_size - filt_offs
        remaining_in = len(samples)
        remaining_out = out_len
        pos = 0
        out: list[int] = []

        while remaining_in > 0 and remaining_out > 0:
            ichunk = min(remaining_in, xlen)
            ochunk = min(remaining_out, _OUT_CHUNK)
            block: list[float] = []
            if state.magic_samples:
                block = self._magic(channel, ochunk)
                ochunk -= len(block)
                remaining_out -= len(block)
            if not state.magic_samples:
                x[filt_offs : filt_offs + ichunk] = samples[pos : pos + ichunk]
                ichunk, produced = self._process_native(channel, ichunk, ochunk)
                ochunk = len(produced)
                block = block + produced
            else:
                ichunk = 0
                ochunk = 0
            out.extend(word_to_int(v) for v in block)
            remaining_in -= ichunk
            remaining_out -= ochunk
            pos += ichunk
        return pos, out

    @staticmethod
    def _check_out_len(out_len: int) -> None:
        if out_len < 0:
            raise ValueError(f"output length must not be negative, got {out_len}")

    def process_float(
        self, channel: int, samples: Sequence[float], out_len: int
    ) -> tuple[int, list[float]]:
        """Resample float samples of one channel.

        Produces at most ``out_len`` samples and returns how many input samples
        were consumed together with the output.
        """
        self._check_channel(channel)
        self._check_out_len(out_len)
        result = self._run_float(channel, [float(v) for v in samples], out_len)
        self._check_kernel()
        return result

    def process_int(
        self, channel: int, samples: Sequence[int], out_len: int
    ) -> tuple[int, list[int]]:
        """Resample 16-bit integer samples of one channel; output saturates at 16 bits."""
        self._check_channel(channel)
        self._check_out_len(out_len)
        result = self._run_int(channel, _int16_samples(samples), out_len)
        self._check_kernel()
        return result

    def _interleaved(
        self,
        run: Callable[[int, Sequence[float], int], tuple[int, list[_S]]],
        samples: Sequence[float],
        out_len: int,
        fill: _S,
    ) -> tuple[int, list[_S]]:
        channels = self._channels
        in_len = len(samples) // channels
        consumed = 0
        outputs: list[list[_S]] = []
        for channel in range(channels):
            consumed, out = run(channel, samples[channel::channels][:in_len], out_len)
            outputs.append(out)
        produced = len(outputs[-1])
        interleaved = [
            out[k] if k < len(out) else fill for k in range(produced) for out in outputs
        ]
        return consumed, interleaved

    def process_interleaved_float(
        self, samples: Sequence[float], out_len: int
    ) -> tuple[int, list[float]]:
        """Resample interleaved float frames; lengths and counts are per channel."""
        self._check_out_len(out_len)
        result = self._interleaved(self._run_float, [float(v) for v in samples], out_len, 0.0)
        self._check_kernel()
        return result

    def process_interleaved_int(
        self, samples: Sequence[int], out_len: int
    ) -> tuple[int, list[int]]:
        """Resample interleaved 16-bit frames; lengths and counts are per channel."""
        self._check_out_len(out_len)
        result = self._interleaved(self._run_int, _int16_samples(samples), out_len, 0)
        self._check_kernel()
        return result

    # ------------------------------------------------------------------
    # Settings

    def set_rate(self, in_rate: int, out_rate: int) -> None:
        """Change the input and output rates in Hz."""
        self.set_rate_frac(in_rate, out_rate, in_rate, out_rate)

    def set_rate_frac(self, ratio_num: int, ratio_den: int, in_rate: int, out_rate: int) -> None:
        """Change the rate ratio to ``ratio_num / ratio_den`` and record the nominal rates."""
        if ratio_num <= 0 or ratio_den <= 0:
            raise ResamplerError(ErrorCode.INVALID_ARG)
        if (
            self._in_rate == in_rate
            and self._out_rate == out_rate
            and self._num_rate == ratio_num
            and self._den_rate == ratio_den
        ):
            return

        old_den = self._den_rate
        self._in_rate = in_rate
        self._out_rate = out_rate
        common = math.gcd(ratio_num, ratio_den)
        self._num_rate = ratio_num // common
        self._den_rate = ratio_den // common

        if old_den > 0:
            den = self._den_rate
            for state in self._state:
                scaled = ((state.samp_frac_num * den) & _U32) // old_den
                state.samp_frac_num = min(scaled, den - 1)

        if self._initialised:
            self._update_filter()

    def set_quality(self, quality: int) -> None:
        """Change the conversion quality, from 0 (fastest) to 10 (best)."""
        check_quality(quality)
        if self._quality == quality:
            return
        self._quality = quality
        if self._initialised:
            self._update_filter()

    def rate(self) -> tuple[int, int]:
        """Return the nominal input and output rates."""
        return self._in_rate, self._out_rate

    def ratio(self) -> tuple[int, int]:
        """Return the rate ratio reduced to lowest terms."""
        return self._num_rate, self._den_rate

    def quality(self) -> int:
        return self._quality

    def input_latency(self) -> int:
        """Latency of the filter measured in input samples."""
        return self._filter.filt_len // 2

    def output_latency(self) -> int:
        """Latency of the filter measured in output samples."""
        half = self._filter.filt_len // 2
        return ((half * self._den_rate + (self._num_rate >> 1)) & _U32) // self._num_rate

    def skip_zeros(self) -> None:
        """Drop the leading silence that the filter delay would otherwise produce."""
        for state in self._state:
            state.last_sample = self._filter.filt_len // 2

    def reset_mem(self) -> None:
        """Clear the history so an unrelated stream can be processed."""
        for state in self._state:
            state.last_sample = 0
            state.magic_samples = 0
            state.samp_frac_num = 0
        remaining = self._channels * max(self._filter.filt_len - 1, 0)
        for buf in self._mem:
            count = min(remaining, len(buf))
            buf[:count] = [0.0] * count
            remaining -= count


def _int16_samples(samples: Sequence[int]) -> list[float]:
    return [float(to_signed(int(v), 16)) for v in samples]


def _grow_history(buf: list[float], state: ChannelState, old_length: int, filt_len: int) -> None:
    """Rearrange one channel's history for a longer filter."""
    magic = state.magic_samples
    olen = old_length + 2 * magic
    count = old_length - 1 + magic
    buf[magic : magic + count] = buf[:count]
    buf[:magic] = [0.0] * magic
    state.magic_samples = 0

    if filt_len > olen:
        shift = filt_len - olen
        buf[shift : shift + olen - 1] = buf[: olen - 1]
        buf[:shift] = [0.0] * shift
        state.last_sample += shift // 2
    else:
        state.magic_samples = (olen - filt_len) // 2
        magic = state.magic_samples
        count = filt_len - 1 + magic
        buf[:count] = buf[magic : magic + count]


def _shrink_history(buf: list[float], state: ChannelState, old_length: int, filt_len: int) -> None:
    """Keep history no longer needed by a shorter filter as pending input."""
    old_magic = state.magic_samples
    magic = (old_length - filt_len) // 2
    count = filt_len - 1 + magic + old_magic
    buf[:count] = buf[magic : magic + count]
    state.magic_samples = magic + old_magic