"""Mutable host-facing CHIP-8 machine.

Wraps the pure engine for a host that owns one machine for its whole life:
load a program once, call :meth:`Machine.step` at its own cadence, write
``keys`` when input changes and read :meth:`Machine.display` /
:meth:`Machine.sound_active` after each step.
"""

import jax
import jax.numpy as jnp
import numpy as np

from chipax.constants import NUM_KEYS
from chipax.emulator import step_jit, load_program, load_rom
from chipax.errors import Fault, MachineFault
from chipax.state import create_state


class Machine:
    """A CHIP-8 machine with mutable, exclusively owned state.

    Attributes:
        keys: Host-writable array of 16 booleans, one per hex key
        state: The current :class:`EmulatorState`
    """

    def __init__(self, seed: int = 0):
        """Create a machine with zeroed state and the font table loaded.

        Args:
            seed: Seed for the random source used by CXKK
        """
        self.state = create_state(jax.random.PRNGKey(seed))
        self.keys = np.zeros(NUM_KEYS, dtype=np.bool_)

    def load(self, program: bytes):
        """Copy ``program`` into memory at 0x200.

        Raises:
            ProgramTooLargeError: If the image is longer than 3584 bytes; the
                machine is left untouched.
        """
        self.state = load_program(self.state, bytes(program))

    def load_rom(self, filename: str):
        """Read a program image file and load it at 0x200.

        Raises:
            OSError: If the file cannot be read
            ProgramTooLargeError: If the image is longer than 3584 bytes
        """
        self.state = load_rom(self.state, filename)

    def step(self):
        """Execute one instruction and tick both timers once.

        Raises:
            MachineFault: If the instruction accessed memory, display, stack or
                keypad out of bounds. The step is discarded and the machine keeps
                its previous state.
        """
        state = self.state.replace(keypad=jnp.asarray(self.keys, dtype=jnp.bool_))
        new_state = step_jit(state)
        fault = int(new_state.fault)
        if fault != Fault.NONE:
            raise MachineFault(Fault(fault), self.pc, self.current_instruction(), int(new_state.fault_address))
        self.state = new_state

    def current_instruction(self) -> int:
        """The instruction word at ``pc``, or 0 if ``pc`` is outside memory."""
        memory = self.memory
        if self.pc + 1 >= len(memory):
            return 0
        return (int(memory[self.pc]) << 8) | int(memory[self.pc + 1])

    def display(self) -> np.ndarray:
        """Read-only 2048-cell framebuffer, row-major, one 0/1 byte per pixel."""
        return _read_only(self.state.display)

    def sound_active(self) -> bool:
        return bool(self.state.sound_timer > 0)

    @property
    def draw_flag(self) -> bool:
        """Whether the display changed since the host last cleared this flag."""
        return bool(self.state.draw_flag)

    @draw_flag.setter
    def draw_flag(self, value: bool):
        self.state = self.state.replace(draw_flag=jnp.bool_(value))

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def index(self) -> int:
        return int(self.state.I)

    @property
    def registers(self) -> np.ndarray:
        return _read_only(self.state.V)

    @property
    def memory(self) -> np.ndarray:
        return _read_only(self.state.memory)

    @property
    def stack(self) -> np.ndarray:
        return _read_only(self.state.stack.data)

    @property
    def sp(self) -> int:
        return int(self.state.stack.pointer)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)


def _read_only(array: jnp.ndarray) -> np.ndarray:
    view = np.array(array)
    view.flags.writeable = False
    return view
