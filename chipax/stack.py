"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chipax.constants import STACK_SIZE
from chipax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack.

    Pushing onto a full stack leaves it unchanged; callers check ``is_full``.
    """
    new_data = stack.data.at[stack.pointer].set(jnp.astype(address, jnp.uint16), mode="drop")
    new_pointer = jnp.minimum(stack.pointer + 1, STACK_SIZE)
    return stack.replace(data=new_data, pointer=jnp.astype(new_pointer, jnp.int32))


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack.

    Popping an empty stack returns address 0; callers check ``is_empty``.
    """
    new_pointer = jnp.maximum(stack.pointer - 1, 0)
    popped_address = jnp.where(stack.pointer > 0, stack.data[new_pointer], jnp.uint16(0))
    return stack.replace(pointer=jnp.astype(new_pointer, jnp.int32)), jnp.astype(popped_address, jnp.uint16)


def is_full(stack: StackState) -> jnp.ndarray:
    return stack.pointer >= STACK_SIZE


def is_empty(stack: StackState) -> jnp.ndarray:
    return stack.pointer <= 0
