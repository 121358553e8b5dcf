"""CHIP-8 virtual machine package."""

from chipax.state import EmulatorState, create_state
from chipax.emulator import execute, fetch, step, step_jit, run_n_steps, tick_timers, load_program, load_rom
from chipax.decode import DecodedInstruction, decode
from chipax.errors import Chip8Error, Fault, MachineFault, ProgramTooLargeError
from chipax.machine import Machine
from chipax.constants import *

__all__ = [
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "step_jit",
    "run_n_steps",
    "tick_timers",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "Chip8Error",
    "Fault",
    "MachineFault",
    "ProgramTooLargeError",
    "Machine",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "MAX_PROGRAM_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "DISPLAY_SIZE",
]
