"""Multi-byte, endian-aware memory access built on single-byte peek and poke.

A class mixing in :class:`MemoryPeek` must provide ``peek(address) -> int``;
one mixing in :class:`MemoryPoke` must provide ``poke(address, value)``.
Bytes are always accessed in ascending address order, and addresses wrap
around at 64 bits.
"""

from __future__ import annotations

from typing import Literal

from .bitcast import to_unsigned

_ADDRESS_MASK = (1 << 64) - 1

_ByteOrder = Literal["little", "big"]


class MemoryPeek:
    """Reads integers of 8 to 64 bits through the host's ``peek`` method."""

    def _peek_int(self, address: int, size: int, byteorder: _ByteOrder, signed: bool) -> int:
        data = bytes(
            self.peek((address + i) & _ADDRESS_MASK) & 0xFF  # type: ignore[attr-defined]
            for i in range(size)
        )
        return int.from_bytes(data, byteorder, signed=signed)

    def peek_u8(self, address: int) -> int:
        return self._peek_int(address, 1, "little", False)

    def peek_i8(self, address: int) -> int:
        return self._peek_int(address, 1, "little", True)

    def peek_u16le(self, address: int) -> int:
        return self._peek_int(address, 2, "little", False)

    def peek_i16le(self, address: int) -> int:
        return self._peek_int(address, 2, "little", True)

    def peek_u16be(self, address: int) -> int:
        return self._peek_int(address, 2, "big", False)

    def peek_i16be(self, address: int) -> int:
        return self._peek_int(address, 2, "big", True)

    def peek_u32le(self, address: int) -> int:
        return self._peek_int(address, 4, "little", False)

    def peek_i32le(self, address: int) -> int:
        return self._peek_int(address, 4, "little", True)

    def peek_u32be(self, address: int) -> int:
        return self._peek_int(address, 4, "big", False)

    def peek_i32be(self, address: int) -> int:
        return self._peek_int(address, 4, "big", True)

    def peek_u64le(self, address: int) -> int:
        return self._peek_int(address, 8, "little", False)

    def peek_i64le(self, address: int) -> int:
        return self._peek_int(address, 8, "little", True)

    def peek_u64be(self, address: int) -> int:
        return self._peek_int(address, 8, "big", False)

    def peek_i64be(self, address: int) -> int:
        return self._peek_int(address, 8, "big", True)


class MemoryPoke:
    """Writes integers of 8 to 64 bits through the host's ``poke`` method.

    Values are truncated to the width being written, signed ones in two's
    complement.
    """

    def _poke_int(self, address: int, size: int, byteorder: _ByteOrder, value: int) -> None:
        data = to_unsigned(value, size * 8).to_bytes(size, byteorder)
        for i, byte in enumerate(data):
            self.poke((address + i) & _ADDRESS_MASK, byte)  # type: ignore[attr-defined]

    def poke_u8(self, address: int, value: int) -> None:
        self._poke_int(address, 1, "little", value)

    def poke_i8(self, address: int, value: int) -> None:
        self._poke_int(address, 1, "little", value)

    def poke_u16le(self, address: int, value: int) -> None:
        self._poke_int(address, 2, "little", value)

    def poke_i16le(self, address: int, value: int) -> None:
        self._poke_int(address, 2, "little", value)

    def poke_u16be(self, address: int, value: int) -> None:
        self._poke_int(address, 2, "big", value)

    def poke_i16be(self, address: int, value: int) -> None:
        self._poke_int(address, 2, "big", value)

    def poke_u32le(self, address: int, value: int) -> None:
        self._poke_int(address, 4, "little", value)

    def poke_i32le(self, address: int, value: int) -> None:
        self._poke_int(address, 4, "little", value)

    def poke_u32be(self, address: int, value: int) -> None:
        self._poke_int(address, 4, "big", value)

    def poke_i32be(self, address: int, value: int) -> None:
        self._poke_int(address, 4, "big", value)

    def poke_u64le(self, address: int, value: int) -> None:
        self._poke_int(address, 8, "little", value)

    def poke_i64le(self, address: int, value: int) -> None:
        self._poke_int(address, 8, "little", value)

    def poke_u64be(self, address: int, value: int) -> None:
        self._poke_int(address, 8, "big", value)

    def poke_i64be(self, address: int, value: int) -> None:
        self._poke_int(address, 8, "big", value)