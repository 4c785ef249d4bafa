"""Audio resampling, emulator debugger descriptions, typed memory access and generational handles."""

__version__ = "0.1.0"