"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipax.state import EmulatorState, flag_fault
from chipax.decode import DecodedInstruction
from chipax.constants import (
    SCREEN_WIDTH, DISPLAY_SIZE, MEMORY_SIZE, SPRITE_WIDTH, MAX_SPRITE_HEIGHT, FLAG_REGISTER,
)
from chipax.errors import Fault

# Pre-computed row/column offsets covering the largest sprite
rows, cols = jnp.meshgrid(jnp.arange(MAX_SPRITE_HEIGHT), jnp.arange(SPRITE_WIDTH), indexing='ij')


def _first(mask, values):
    """Value at the first position where ``mask`` is set."""
    return values.ravel()[jnp.argmax(mask.ravel())]


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - XOR an 8xN sprite from memory[I] onto the display at (VX, VY).

    Pixels are addressed as ``(VY + row) * 64 + VX + col`` with no wrapping or
    clipping, so a sprite past the right edge continues on the next line. A set
    bit landing outside the display, or a sprite row outside memory, is a fault.
    VF is cleared before the coordinates are read, then set to 1 when any set
    pixel was turned off.
    """
    V = state.V.at[FLAG_REGISTER].set(0)
    sprite_x = jnp.astype(V[instruction.x], jnp.int32)
    sprite_y = jnp.astype(V[instruction.y], jnp.int32)
    height = jnp.astype(instruction.n, jnp.int32)

    row_addresses = jnp.astype(state.I, jnp.int32) + rows
    in_sprite = rows < height
    memory_fault = in_sprite & (row_addresses >= MEMORY_SIZE)
    state = flag_fault(state, jnp.any(memory_fault), Fault.MEMORY, _first(memory_fault, row_addresses))

    sprite_bytes = jnp.astype(state.memory[jnp.minimum(row_addresses, MEMORY_SIZE - 1)], jnp.int32)
    lit = in_sprite & (((sprite_bytes >> (7 - cols)) & 1) == 1)

    positions = (sprite_y + rows) * SCREEN_WIDTH + sprite_x + cols
    display_fault = lit & (positions >= DISPLAY_SIZE)
    state = flag_fault(state, jnp.any(display_fault), Fault.DISPLAY, _first(display_fault, positions))

    sprite = jnp.zeros(DISPLAY_SIZE, dtype=jnp.uint8).at[positions.ravel()].add(
        jnp.astype(lit.ravel(), jnp.uint8), mode='drop'
    )
    collision = jnp.any((state.display & sprite) == 1)

    return state.replace(
        display=state.display ^ sprite,
        V=V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        draw_flag=jnp.bool_(True),
    )
