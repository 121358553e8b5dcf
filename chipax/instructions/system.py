"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState, flag_fault, instruction_address
from chipax.decode import DecodedInstruction
from chipax.errors import Fault
from chipax.logging import report_unrecognized
from chipax.stack import pop, is_empty


def unrecognized(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Report an undefined instruction and otherwise ignore it."""
    report_unrecognized(instruction.raw, instruction_address(state))
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display), draw_flag=jnp.bool_(True))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine to the instruction after the call."""
    state = flag_fault(state, is_empty(state.stack), Fault.STACK_UNDERFLOW, state.stack.pointer)
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=jnp.astype(address + 2, jnp.uint16))


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions."""
    return jax.lax.cond(
        0x00E0 == instruction.raw,
        execute_clear_screen,
        lambda state, instruction: jax.lax.cond(
            0x00EE == instruction.raw,
            execute_return,
            unrecognized,
            state, instruction
        ),
        state, instruction
    )
