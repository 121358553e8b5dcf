"""Main CHIP-8 execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState, flag_fault
from chipax.decode import decode
from chipax.constants import PROGRAM_START, MAX_PROGRAM_SIZE, MEMORY_SIZE
from chipax.errors import Fault, ProgramTooLargeError
from chipax.instructions.system import execute_system_instruction
from chipax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipax.instructions.alu import execute_alu_operation
from chipax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipax.instructions.display import execute_display
from chipax.instructions.misc import execute_misc_instruction

# Indexed by the first nibble of the instruction
INSTRUCTION_FAMILIES = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Expects ``pc`` to already point past the instruction, as left by :func:`fetch`.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.opcode, INSTRUCTION_FAMILIES, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance ``pc`` past it."""
    address = jnp.astype(state.pc, jnp.int32)
    state = flag_fault(state, address + 1 >= MEMORY_SIZE, Fault.MEMORY, address)
    high = state.memory[jnp.minimum(address, MEMORY_SIZE - 1)]
    low = state.memory[jnp.minimum(address + 1, MEMORY_SIZE - 1)]
    return state.replace(pc=jnp.astype(state.pc + 2, jnp.uint16)), _pack_u16(high, low)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def step(state: EmulatorState) -> EmulatorState:
    """Run one fetch-decode-execute cycle followed by one timer tick."""
    state, instruction = fetch(state)
    state = execute(state, instruction)
    return tick_timers(state)


step_jit = jax.jit(step)


def _scan_step(state, _):
    state = step(state)
    return state, None


@partial(jax.jit, static_argnums=1)
def run_n_steps(state: EmulatorState, n: int) -> EmulatorState:
    """Run ``n`` cycles in a single compiled loop.

    Faults are not checked between cycles; inspect ``state.fault`` afterwards.
    """
    state, _ = jax.lax.scan(_scan_step, state, length=n)
    return state


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy a program image into memory at 0x200, leaving all other state alone.

    Raises:
        ProgramTooLargeError: If the image is longer than 3584 bytes
    """
    if len(program) > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(len(program), MAX_PROGRAM_SIZE)
    if len(program) == 0:
        return state
    program_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(program_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
