# hackcon

hackcon is a small pure-Python library with no runtime dependencies. It provides:

- **`hackcon.resampler`**: a streaming, arbitrary-ratio audio resampler.
  - It uses windowed-sinc filtering with cubic interpolation of the filter table.
  - Quality runs from 0 to 10.
  - It handles any number of channels.
  - It accepts float or 16-bit integer samples, either per channel or interleaved.
- **`hackcon.debugif`**: plain descriptions of an emulated machine, meant for a debugger front end.
  - Systems, CPUs, memory regions and breakpoints.
  - Register numbering for the Z80 and the 6502.
- **`hackcon.peekpoke`**: signed and unsigned 8/16/32/64-bit reads and writes.
  - Little- or big-endian byte order.
  - Built on any byte-level `peek`/`poke`.
- **`hackcon.handles`**: generational handles into a slot allocator.
  - Stale handles are detected instead of silently reused.
- **`hackcon.bitcast`**: `to_signed` and `to_unsigned`, which reinterpret integers in two's complement at a given bit width.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Resampling

```python
from hackcon.resampler import Resampler

rs = Resampler(channels=1, in_rate=44100, out_rate=48000, quality=4)
rs.skip_zeros()

consumed, out = rs.process_float(0, [0.0, 0.25, 0.5, 0.25] * 256, out_len=2048)
print(consumed, len(out))

print(rs.ratio())           # (147, 160): the ratio in lowest terms
print(rs.rate())            # (44100, 48000)
print(rs.input_latency())   # latency in input samples
print(rs.output_latency())  # latency in output samples
```

### Processing

- Every processing method returns a pair: the number of input samples consumed (per channel), and the output samples.
- The output has at most `out_len` samples per channel.
- Each channel keeps its own history, so a stream can be fed in pieces.
- `process_float(channel, samples, out_len)` and `process_int(channel, samples, out_len)` work on one channel.
  - `process_int` reads its input as 16-bit signed values.
  - It returns integers rounded and saturated to the 16-bit range.
- `process_interleaved_float(samples, out_len)` and `process_interleaved_int(samples, out_len)` take frames interleaved across all channels and return the output interleaved the same way.

### Settings

- `Resampler.from_ratio(channels, ratio_num, ratio_den, in_rate, out_rate, quality)` creates a resampler whose ratio is an arbitrary fraction.
- `set_rate`, `set_rate_frac` and `set_quality` change settings on a live resampler. The filter history is carried over.
- `skip_zeros()` drops the leading silence caused by the filter delay.
- `reset_mem()` clears the history so that an unrelated stream can be processed.

### Errors

Failures raise `hackcon.errors.ResamplerError`. Its `code` attribute holds an `ErrorCode`. The cases are:

- A quality outside 0–10 raises `INVALID_ARG`.
- A channel count below one raises `INVALID_ARG`.
- A non-positive ratio raises `INVALID_ARG`.
- A filter too large to build raises `ALLOC_FAILED`.

Other bad arguments raise Python's own exceptions:

- A channel index out of range raises `IndexError`.
- A negative `out_len` raises `ValueError`.

`hackcon.resampler.strerror(code)` returns the English message for a status code. Unknown codes get a generic message.

The quality constants `QUALITY_MIN`, `QUALITY_MAX`, `QUALITY_DEFAULT`, `QUALITY_VOIP` and `QUALITY_DESKTOP` live in `hackcon.errors`.

The lower-level pieces are also public:

- `hackcon.sinc`: window tables, `quality_mapping`, `sinc`, `cubic_coef`, `word_to_int`.
- `hackcon.kernels`: the filter loops and `select_kernel`.

## Typed memory access

Mix `MemoryPeek` and/or `MemoryPoke` into a class that defines `peek(address)` and `poke(address, value)` for single bytes. The class then gains methods such as:

- `peek_u8`, `peek_i16le`, `peek_u32be`, `peek_i64le`
- `poke_u16be`, `poke_i32le`, `poke_u64be`

Bytes are accessed in ascending address order, and addresses wrap at 64 bits. Values being written are truncated to the width of the write.

## Debugger descriptions

`hackcon.debugif` holds frozen dataclasses built from callables you supply:

- **`MemoryRegion`**
  - It supports the typed peek/poke methods above.
  - `is_writable()` reports whether it has a writer.
  - Poking a read-only region raises `PermissionError`.
- **`Cpu`**
  - `get_register` and `set_register` read and write registers.
  - `supports(name)` tells whether an optional operation is provided. Such operations include `step_into` and `set_exec_breakpoint`.
- **`System`**
  - It holds the CPUs and any extra memory regions.
  - `main_cpu()` returns the CPU marked as main, or `None`.
- **`Breakpoint`**
  - `enable(yes)` switches the breakpoint on or off.

Other names in the module:

- Register numbers: `Z80Register` and `M6502Register`.
- Interrupt kinds: `Z80Interrupt`.
- CPU type codes are built with `make_cpu_type(cpu_id, version)` and read back with `cpu_api_version`.
- The predefined codes are `CPU_Z80` and `CPU_6502`.

## Handles

```python
from hackcon.handles import HandleAllocator

alloc = HandleAllocator()
h = alloc.allocate("sprite")
alloc.translate(h)   # "sprite"
alloc.free(h)
alloc.translate(h)   # None: the handle is stale
```

`reset()` invalidates every handle handed out so far.

## What this package does not do

- It has no command-line program.
- It does not read or write audio files, and it does not talk to audio devices. You pass samples in and get samples back.
- `hackcon.debugif` only describes a machine. It emulates no CPU, and it provides no debugger user interface.