"""Exceptions and fault codes raised by the CHIP-8 machine."""

import enum


class Fault(enum.IntEnum):
    """Fault codes recorded in ``EmulatorState.fault``."""
    NONE = 0
    MEMORY = 1
    DISPLAY = 2
    STACK_OVERFLOW = 3
    STACK_UNDERFLOW = 4
    KEYPAD = 5


class Chip8Error(Exception):
    """Base class for all CHIP-8 machine errors."""


class ProgramTooLargeError(Chip8Error, ValueError):
    """Program image does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Program is {size} bytes, at most {limit} bytes fit in memory")


class MachineFault(Chip8Error, RuntimeError):
    """An instruction addressed memory, display, stack or keypad out of bounds.

    Attributes:
        kind: The :class:`Fault` that was recorded
        pc: Address of the faulting instruction
        instruction: The faulting 16-bit instruction word
        address: Offending address, position, stack pointer or key index
    """

    def __init__(self, kind: Fault, pc: int, instruction: int, address: int):
        self.kind = Fault(kind)
        self.pc = pc
        self.instruction = instruction
        self.address = address
        super().__init__(
            f"{self.kind.name.lower()} fault: instruction 0x{instruction:04X} "
            f"at pc 0x{pc:03X} (address 0x{address:X})"
        )
