"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState, flag_fault, instruction_address
from chipax.decode import DecodedInstruction
from chipax.constants import NUM_KEYS
from chipax.errors import Fault
from chipax.instructions.system import unrecognized
from chipax.stack import push, is_full


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Push the address of this call and jump to NNN."""
    state = flag_fault(state, is_full(state.stack), Fault.STACK_OVERFLOW, state.stack.pointer)
    state = state.replace(stack=push(state.stack, instruction_address(state)))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=jnp.astype(s.pc + 2, jnp.uint16)),
            lambda s: s,
            state
        )
    return skip_instruction


def require_zero_suffix(execute_fn):
    """Guard 5XY0/9XY0: any other last nibble is unrecognized."""
    def guarded(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        return jax.lax.cond(instruction.n == 0, execute_fn, unrecognized, state, instruction)
    return guarded


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.kk
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.kk
)

execute_skip_if_equal_register = require_zero_suffix(make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
))

execute_skip_if_not_equal_register = require_zero_suffix(make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
))


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = jnp.astype(instruction.nnn, jnp.uint16) + jnp.astype(state.V[0], jnp.uint16)
    return state.replace(pc=jump_address)


def _skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    key_index = state.V[instruction.x]
    state = flag_fault(state, key_index >= NUM_KEYS, Fault.KEYPAD, key_index)
    key_pressed = state.keypad[jnp.minimum(key_index, NUM_KEYS - 1)]
    is_not_instruction = (instruction.kk == 0xA1)
    condition = key_pressed ^ is_not_instruction

    return jax.lax.cond(
        condition,
        lambda state: state.replace(pc=jnp.astype(state.pc + 2, jnp.uint16)),
        lambda state: state,
        state
    )


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key VX pressed/not pressed."""
    return jax.lax.cond(
        (instruction.kk == 0x9E) | (instruction.kk == 0xA1),
        _skip_if_key,
        unrecognized,
        state, instruction
    )
