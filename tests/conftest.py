"""Test configuration and fixtures for CHIP-8 machine tests."""

import pytest
import jax.numpy as jnp
from chipax import Machine, create_state, load_program, step_jit


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state()


@pytest.fixture
def machine():
    """Provide a fresh host-facing machine."""
    return Machine()


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def with_program(state, program):
    """Load raw program bytes at 0x200."""
    return load_program(state, bytes(program))


def run_steps(state, count=1):
    """Run ``count`` full fetch-execute-tick cycles."""
    for _ in range(count):
        state = step_jit(state)
    return state
