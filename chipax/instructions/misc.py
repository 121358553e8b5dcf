"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState, flag_fault
from chipax.decode import DecodedInstruction
from chipax.constants import FONT_START, FONT_GLYPH_SIZE, MEMORY_SIZE, NUM_REGISTERS
from chipax.errors import Fault
from chipax.instructions.system import unrecognized

register_indices = jnp.arange(NUM_REGISTERS)


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I. No flag is set and I may pass 0xFFF."""
    return state.replace(I=state.I + jnp.astype(state.V[instruction.x], jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Polls once per step: with no key down the instruction repeats, otherwise
    VX receives the lowest pressed key.
    """
    def key_pressed_action(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return state.replace(V=state.V.at[instruction.x].set(pressed_key))

    def wait_action(state):
        return state.replace(pc=jnp.astype(state.pc - 2, jnp.uint16))

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]
    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = jnp.astype(state.I, jnp.int32) + jnp.arange(3)
    state = flag_fault(state, indices[2] >= MEMORY_SIZE, Fault.MEMORY, indices[2])
    return state.replace(memory=state.memory.at[indices].set(digits, mode='drop'))


def _block_indices(state: EmulatorState, instruction: DecodedInstruction):
    """Addresses I..I+15, the mask selecting V0..VX, and the fault check for I+X."""
    base_indices = jnp.astype(state.I, jnp.int32) + register_indices
    register_mask = register_indices <= instruction.x
    last = jnp.astype(state.I, jnp.int32) + instruction.x
    state = flag_fault(state, last >= MEMORY_SIZE, Fault.MEMORY, last)
    return state, base_indices, register_mask


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    state, base_indices, register_mask = _block_indices(state, instruction)
    current_memory_values = state.memory[jnp.minimum(base_indices, MEMORY_SIZE - 1)]
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    new_memory = state.memory.at[base_indices].set(new_memory_values, mode='drop')
    return state.replace(memory=new_memory)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    state, base_indices, register_mask = _block_indices(state, instruction)
    memory_values = state.memory[jnp.minimum(base_indices, MEMORY_SIZE - 1)]
    return state.replace(V=jnp.where(register_mask, memory_values, state.V))


MISC_OPERATIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}

# Maps the low byte to a branch index; undefined bytes map past the table.
_misc_keys = jnp.array(list(MISC_OPERATIONS), dtype=jnp.int32)


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch FX instructions on their low byte."""
    matches = _misc_keys == instruction.kk
    switch_index = jnp.where(jnp.any(matches), jnp.argmax(matches), len(MISC_OPERATIONS))

    return jax.lax.switch(
        switch_index,
        [*MISC_OPERATIONS.values(), unrecognized],
        state, instruction
    )
