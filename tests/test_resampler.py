import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from hackcon.errors import ErrorCode, ResamplerError
from hackcon.resampler import Resampler, strerror
from hackcon.sinc import quality_mapping

BIG = 10**6


def _sine(n, step=0.05):
    return [math.sin(step * k) for k in range(n)]


def test_strerror_known_codes():
    assert strerror(0) == "Success."
    assert strerror(ErrorCode.ALLOC_FAILED) == "Memory allocation failed."
    assert strerror(2) == "Bad resampler state."
    assert strerror(3) == "Invalid argument."
    assert strerror(4) == "Input and output buffers overlap."


def test_strerror_unknown_code():
    assert strerror(99) == "Unknown error. Bad error code or strange version mismatch."


@pytest.mark.parametrize("quality", [-1, 11])
def test_invalid_quality_rejected(quality):
    with pytest.raises(ResamplerError) as info:
        Resampler(1, 44100, 48000, quality)
    assert info.value.code == ErrorCode.INVALID_ARG


def test_zero_channels_rejected():
    with pytest.raises(ResamplerError) as info:
        Resampler(0, 44100, 48000, 4)
    assert info.value.code == ErrorCode.INVALID_ARG


def test_ratio_is_reduced():
    r = Resampler(2, 44100, 48000, 4)
    num, den = r.ratio()
    assert num * 48000 == den * 44100
    assert math.gcd(num, den) == 1
    assert r.rate() == (44100, 48000)


def test_from_ratio_keeps_rates():
    r = Resampler.from_ratio(1, 2, 1, 96000, 48000, 4)
    assert r.ratio() == (2, 1)
    assert r.rate() == (96000, 48000)


def test_quality_changes_and_invalid_quality_keeps_old():
    r = Resampler(1, 44100, 48000, 4)
    assert r.quality() == 4
    r.set_quality(10)
    assert r.quality() == 10
    with pytest.raises(ResamplerError):
        r.set_quality(11)
    assert r.quality() == 10


def test_input_latency_follows_quality_preset():
    r = Resampler(1, 44100, 48000, 4)
    assert r.input_latency() == quality_mapping(4).base_length // 2


def test_equal_rates_have_equal_latencies():
    r = Resampler(1, 8000, 8000, 3)
    assert r.output_latency() == r.input_latency()


def test_set_rate_updates_rate_and_ratio():
    r = Resampler(1, 8000, 16000, 4)
    r.set_rate(16000, 8000)
    assert r.rate() == (16000, 8000)
    assert r.ratio() == (2, 1)


def test_zero_ratio_rejected():
    r = Resampler(1, 8000, 16000, 4)
    with pytest.raises(ResamplerError) as info:
        r.set_rate_frac(0, 1, 8000, 16000)
    assert info.value.code == ErrorCode.INVALID_ARG


def test_channel_out_of_range():
    r = Resampler(2, 8000, 16000, 4)
    with pytest.raises(IndexError):
        r.process_float(2, [0.0] * 10, 100)


def test_negative_out_len_rejected():
    r = Resampler(1, 8000, 16000, 4)
    with pytest.raises(ValueError):
        r.process_float(0, [0.0] * 10, -1)


def test_silence_stays_silent():
    r = Resampler(1, 44100, 48000, 4)
    consumed, out = r.process_float(0, [0.0] * 1000, BIG)
    assert consumed == 1000
    assert out and all(v == 0.0 for v in out)


def test_equal_rates_keep_length():
    r = Resampler(1, 8000, 8000, 4)
    consumed, out = r.process_float(0, _sine(1000), BIG)
    assert consumed == 1000
    assert len(out) == 1000


def test_upsampling_doubles_length():
    r = Resampler(1, 8000, 16000, 4)
    consumed, out = r.process_float(0, _sine(1000), BIG)
    assert consumed == 1000
    assert len(out) == 2 * consumed


def test_downsampling_halves_length():
    r = Resampler(1, 16000, 8000, 4)
    consumed, out = r.process_float(0, _sine(1000), BIG)
    assert consumed == 1000
    assert len(out) == consumed // 2


def test_output_limit_is_respected():
    r = Resampler(1, 8000, 8000, 4)
    consumed, out = r.process_float(0, _sine(100), 10)
    assert len(out) == 10
    assert consumed == 10


def test_skip_zeros_removes_latency():
    r = Resampler(1, 8000, 8000, 4)
    r.skip_zeros()
    consumed, out = r.process_float(0, _sine(1000), BIG)
    assert consumed == 1000
    assert len(out) == 1000 - r.input_latency()


@pytest.mark.parametrize(
    "in_rate,out_rate,quality",
    [(44100, 48000, 4), (48000, 44100, 4), (44100, 48000, 10), (8000, 16000, 5), (16000, 8000, 7)],
)
def test_dc_gain_close_to_unity(in_rate, out_rate, quality):
    r = Resampler(1, in_rate, out_rate, quality)
    _, out = r.process_float(0, [1.0] * 4000, BIG)
    settled = out[2 * r.output_latency() + 2 :]
    assert len(settled) > 100
    assert all(abs(v - 1.0) < 0.05 for v in settled)


@given(st.integers(min_value=1, max_value=200))
@settings(max_examples=15, deadline=None)
def test_chunked_matches_one_shot(chunk):
    signal = _sine(600)
    _, whole = Resampler(1, 44100, 48000, 3).process_float(0, signal, BIG)
    r = Resampler(1, 44100, 48000, 3)
    pieces = []
    for start in range(0, len(signal), chunk):
        piece = signal[start : start + chunk]
        consumed, out = r.process_float(0, piece, BIG)
        assert consumed == len(piece)
        pieces.extend(out)
    assert pieces == pytest.approx(whole, rel=1e-9, abs=1e-12)


def test_reset_mem_restarts_stream():
    signal = _sine(700)
    r = Resampler(1, 44100, 48000, 4)
    _, first = r.process_float(0, signal, BIG)
    r.reset_mem()
    _, second = r.process_float(0, signal, BIG)
    assert second == pytest.approx(first, rel=1e-12, abs=1e-12)


def test_interleaved_matches_mono():
    left = _sine(500)
    right = _sine(500, 0.11)
    frames = [v for pair in zip(left, right) for v in pair]
    stereo = Resampler(2, 22050, 44100, 4)
    consumed, out = stereo.process_interleaved_float(frames, BIG)
    _, mono_left = Resampler(1, 22050, 44100, 4).process_float(0, left, BIG)
    _, mono_right = Resampler(1, 22050, 44100, 4).process_float(0, right, BIG)
    assert consumed == len(left)
    assert out[0::2] == pytest.approx(mono_left)
    assert out[1::2] == pytest.approx(mono_right)


def test_interleaved_int_stays_in_range():
    frames = [30000 if k % 2 == 0 else -30000 for k in range(2000)]
    r = Resampler(2, 8000, 16000, 4)
    consumed, out = r.process_interleaved_int(frames, BIG)
    assert consumed == 1000
    assert len(out) == 2 * 2 * consumed
    assert all(-32768 <= v <= 32767 for v in out)


def test_process_int_saturates_and_holds_level():
    r = Resampler(1, 44100, 48000, 4)
    consumed, out = r.process_int(0, [32767] * 3000, BIG)
    assert consumed == 3000
    assert all(isinstance(v, int) and -32768 <= v <= 32767 for v in out)
    settled = out[2 * r.output_latency() + 2 :]
    assert all(abs(v - 32767) < 1700 for v in settled)


@pytest.mark.parametrize("first,second", [(4, 10), (10, 4)])
def test_quality_change_mid_stream(first, second):
    r = Resampler(1, 44100, 48000, first)
    r.process_float(0, [1.0] * 2000, BIG)
    r.set_quality(second)
    consumed, out = r.process_float(0, [1.0] * 3000, BIG)
    assert consumed == 3000
    assert r.input_latency() == quality_mapping(second).base_length // 2
    assert all(abs(v - 1.0) < 0.05 for v in out[-500:])