"""CHIP-8 ALU operations (8xxx).

Every operation maps the register file ``V`` to a new one. Writes happen in
the order the machine performs them, which matters when X is the flags
register F.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.constants import FLAG_REGISTER
from chipax.instructions.system import unrecognized


def _u8(value) -> jnp.ndarray:
    return jnp.astype(value & 0xFF, jnp.uint8)


def alu_set(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY0 - Set: VX = VY."""
    return V.at[x].set(V[y])


def alu_or(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY1 - Binary OR: VX |= VY."""
    return V.at[x].set(V[x] | V[y])


def alu_and(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY2 - Binary AND: VX &= VY."""
    return V.at[x].set(V[x] & V[y])


def alu_xor(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY3 - Logical XOR: VX ^= VY."""
    return V.at[x].set(V[x] ^ V[y])


def alu_add(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY4 - Add: VX += VY, VF = carry."""
    total = jnp.astype(V[x], jnp.int32) + jnp.astype(V[y], jnp.int32)
    V = V.at[x].set(_u8(total))
    return V.at[FLAG_REGISTER].set(jnp.astype(total > 0xFF, jnp.uint8))


def alu_sub_xy(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    vx = jnp.astype(V[x], jnp.int32)
    vy = jnp.astype(V[y], jnp.int32)
    V = V.at[x].set(_u8(vx - vy))
    return V.at[FLAG_REGISTER].set(jnp.astype(vx > vy, jnp.uint8))


def alu_shift_right(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY6 - Shift right: VF = low bit of VX, then VX >>= 1."""
    V = V.at[FLAG_REGISTER].set(V[x] & 1)
    return V.at[x].set(V[x] >> 1)


def alu_sub_yx(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX."""
    vx = jnp.astype(V[x], jnp.int32)
    vy = jnp.astype(V[y], jnp.int32)
    V = V.at[x].set(_u8(vy - vx))
    return V.at[FLAG_REGISTER].set(jnp.astype(vy > vx, jnp.uint8))


def alu_shift_left(V: jnp.ndarray, x, y) -> jnp.ndarray:
    """8XYE - Shift left: VF = high bit of VX, then VX <<= 1."""
    V = V.at[FLAG_REGISTER].set(V[x] >> 7)
    return V.at[x].set(_u8(jnp.astype(V[x], jnp.int32) << 1))


def _register_op(alu_fn):
    def execute_register_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        return state.replace(V=alu_fn(state.V, instruction.x, instruction.y))
    return execute_register_op


# Indexed by the last nibble; 8..D and F are undefined.
ALU_OPERATIONS = [
    _register_op(alu_set),
    _register_op(alu_or),
    _register_op(alu_and),
    _register_op(alu_xor),
    _register_op(alu_add),
    _register_op(alu_sub_xy),
    _register_op(alu_shift_right),
    _register_op(alu_sub_yx),
    *[unrecognized] * 6,
    _register_op(alu_shift_left),
    unrecognized,
]


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    return jax.lax.switch(instruction.n, ALU_OPERATIONS, state, instruction)
