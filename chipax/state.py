"""CHIP-8 machine state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, field, PyTreeNode

from chipax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, DISPLAY_SIZE,
    NUM_REGISTERS, NUM_KEYS, STACK_SIZE,
)


@dataclass(frozen=True)
class StackState:
    """Call stack of return addresses and the next free slot."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))


class EmulatorState(PyTreeNode):
    """Complete CHIP-8 machine state.

    ``display`` is row-major, one byte per pixel (index ``y * 64 + x``), every
    cell 0 or 1. ``V[0xF]`` doubles as the flags register. ``fault`` and
    ``fault_address`` record the first out-of-bounds access of the last step
    (see :class:`chipax.errors.Fault`).
    """
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    I: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros(DISPLAY_SIZE, dtype=jnp.uint8))
    stack: StackState = field(default_factory=lambda: StackState())
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    draw_flag: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    fault: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    fault_address: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))


def create_state(rng: jax.Array = jax.random.PRNGKey(0)) -> EmulatorState:
    """Create initial machine state with the font table loaded."""
    state = EmulatorState(rng)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def flag_fault(state: EmulatorState, condition, kind: int, address) -> EmulatorState:
    """Record ``kind`` at ``address`` when ``condition`` holds and no fault is pending."""
    record = condition & (state.fault == 0)
    return state.replace(
        fault=jnp.where(record, jnp.uint8(kind), state.fault),
        fault_address=jnp.where(record, jnp.astype(address, jnp.int32), state.fault_address),
    )


def instruction_address(state: EmulatorState) -> jnp.ndarray:
    """Address of the instruction being executed (``pc`` has already moved past it)."""
    return jnp.astype(state.pc - 2, jnp.uint16)
