"""Description of an emulated system as exposed to the debugger."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum

from .peekpoke import MemoryPeek, MemoryPoke

API_VERSION = 1

_U64_MASK = (1 << 64) - 1


def make_cpu_type(cpu_id: int, version: int) -> int:
    """Combine a CPU identifier and its API version into a CPU type code."""
    return (cpu_id << 16 | version) & 0xFFFFFFFF


def cpu_api_version(cpu_type: int) -> int:
    """Return the API version encoded in a CPU type code."""
    return cpu_type & 0xFFFF


CPU_Z80 = make_cpu_type(0, 1)
CPU_6502 = make_cpu_type(1, 1)


class Z80Register(IntEnum):
    A = 0
    F = 1
    BC = 2
    DE = 3
    HL = 4
    IX = 5
    IY = 6
    AF2 = 7
    BC2 = 8
    DE2 = 9
    HL2 = 10
    I = 11  # noqa: E741
    R = 12
    SP = 13
    PC = 14
    IFF = 15
    IM = 16
    WZ = 17


class Z80Interrupt(IntEnum):
    INT = 0
    NMI = 1


class M6502Register(IntEnum):
    A = 0
    X = 1
    Y = 2
    S = 3
    PC = 4
    P = 5


@dataclass(frozen=True, eq=False)
class Breakpoint:
    """A breakpoint kind that is not covered by a dedicated method."""

    description: str
    on_enable: Callable[[bool], int]

    def enable(self, yes: bool) -> int:
        """Enable or disable the breakpoint and return its identifier."""
        return int(self.on_enable(bool(yes)))


@dataclass(frozen=True, eq=False)
class MemoryRegion(MemoryPeek, MemoryPoke):
    """A byte-addressable memory region.

    ``writer`` is ``None`` for read-only memory; ``set_watchpoint`` is ``None``
    when watchpoints are not supported.
    """

    id: str
    description: str
    alignment: int
    base_address: int
    size: int
    reader: Callable[[int], int]
    writer: Callable[[int, int], None] | None = None
    set_watchpoint: Callable[[int, int, bool, bool], int] | None = None
    breakpoints: tuple[Breakpoint, ...] = ()

    def peek(self, address: int) -> int:
        return int(self.reader(address & _U64_MASK)) & 0xFF

    def poke(self, address: int, value: int) -> None:
        if self.writer is None:
            raise PermissionError(f"memory region {self.id!r} is read-only")
        self.writer(address & _U64_MASK, value & 0xFF)

    def is_writable(self) -> bool:
        return self.writer is not None


_OPTIONAL_CPU_FEATURES = frozenset(
    {
        "set_reg_breakpoint",
        "step_into",
        "step_over",
        "step_out",
        "set_exec_breakpoint",
        "set_io_watchpoint",
        "set_int_breakpoint",
    }
)


@dataclass(frozen=True, eq=False)
class Cpu:
    """A CPU of the emulated system; optional operations are ``None`` when unsupported."""

    description: str
    cpu_type: int
    is_main: bool
    memory_region: MemoryRegion
    register_reader: Callable[[int], int]
    register_writer: Callable[[int, int], None]
    set_reg_breakpoint: Callable[[int], int] | None = None
    step_into: Callable[[], None] | None = None
    step_over: Callable[[], None] | None = None
    step_out: Callable[[], None] | None = None
    set_exec_breakpoint: Callable[[int], int] | None = None
    set_io_watchpoint: Callable[[int, int, bool, bool], int] | None = None
    set_int_breakpoint: Callable[[int], int] | None = None
    breakpoints: tuple[Breakpoint, ...] = ()

    @property
    def api_version(self) -> int:
        return cpu_api_version(self.cpu_type)

    def get_register(self, reg: int) -> int:
        return int(self.register_reader(int(reg))) & _U64_MASK

    def set_register(self, reg: int, value: int) -> None:
        self.register_writer(int(reg), value & _U64_MASK)

    def supports(self, feature: str) -> bool:
        """Tell whether the optional operation named ``feature`` is available."""
        if feature not in _OPTIONAL_CPU_FEATURES:
            raise ValueError(f"unknown CPU feature {feature!r}")
        return getattr(self, feature) is not None


@dataclass(frozen=True, eq=False)
class System:
    """The emulated system: its CPUs and the memory no CPU can address."""

    description: str
    cpus: tuple[Cpu, ...] = ()
    memory_regions: tuple[MemoryRegion, ...] = ()
    breakpoints: tuple[Breakpoint, ...] = ()

    def main_cpu(self) -> Cpu | None:
        return next((cpu for cpu in self.cpus if cpu.is_main), None)