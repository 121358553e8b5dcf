"""Tests for control flow instructions."""

import jax.numpy as jnp
from chipax import execute, Fault
from conftest import with_program, run_steps


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = run_steps(with_program(fresh_state, [0x13, 0x00]))
        assert state.pc == 0x300

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump to NNN + V0."""
        state = execute(fresh_state, 0x6005)  # V0 = 5
        state = run_steps(with_program(state, [0xB3, 0x00]))
        assert state.pc == 0x305

    def test_jump_with_offset_ignores_other_registers(self, fresh_state):
        """BNNN - Only V0 contributes to the target."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0x6230)  # V2 = 0x30
        state = run_steps(with_program(state, [0xB2, 0x50]))
        assert state.pc == 0x260


class TestSkipInstructions:
    """Test all skip instruction variants against a two-instruction program."""

    def test_skip_if_equal_immediate(self, fresh_state):
        """3XKK - Falls through on mismatch, skips on match."""
        state = execute(fresh_state, 0x65AB)  # V5 = 0xAB
        state = with_program(state, [0x35, 0x01, 0x35, 0xAB])

        state = run_steps(state)
        assert state.pc == 0x202

        state = run_steps(state)
        assert state.pc == 0x206

    def test_skip_if_not_equal_immediate(self, fresh_state):
        """4XKK - Falls through on match, skips on mismatch."""
        state = execute(fresh_state, 0x65AB)  # V5 = 0xAB
        state = with_program(state, [0x45, 0xAB, 0x45, 0x01])

        state = run_steps(state)
        assert state.pc == 0x202

        state = run_steps(state)
        assert state.pc == 0x206

    def test_skip_if_equal_register(self, fresh_state):
        """5XY0 - Skips once VX == VY."""
        state = execute(fresh_state, 0x65AB)  # V5 = 0xAB
        state = with_program(state, [0x55, 0x60, 0x55, 0x60])

        state = run_steps(state)
        assert state.pc == 0x202

        state = execute(state, 0x66AB)  # V6 = 0xAB
        state = run_steps(state)
        assert state.pc == 0x206

    def test_skip_if_not_equal_register(self, fresh_state):
        """9XY0 - Skips once VX != VY."""
        state = execute(fresh_state, 0x65AB)  # V5 = 0xAB
        state = execute(state, 0x66AB)  # V6 = 0xAB
        state = with_program(state, [0x95, 0x60, 0x95, 0x60])

        state = run_steps(state)
        assert state.pc == 0x202

        state = execute(state, 0x6600)  # V6 = 0
        state = run_steps(state)
        assert state.pc == 0x206

    def test_skip_with_zero_values(self, fresh_state):
        """3X00 - Registers start at zero."""
        state = run_steps(with_program(fresh_state, [0x30, 0x00]))
        assert state.pc == 0x204

    def test_register_skip_requires_zero_suffix(self, fresh_state):
        """5XY1/9XY1 - Undefined, never skip."""
        state = execute(fresh_state, 0x6601)  # V6 = 1, V5 stays 0
        state = with_program(state, [0x55, 0x51, 0x95, 0x61])

        state = run_steps(state)
        assert state.pc == 0x202

        state = run_steps(state)
        assert state.pc == 0x204
        assert state.fault == Fault.NONE


class TestKeySkips:
    """Test EX9E/EXA1."""

    def test_skip_if_key_pressed(self, fresh_state):
        """EX9E - Skips only while key VX is down."""
        state = execute(fresh_state, 0x6506)  # V5 = 6
        state = with_program(state, [0xE5, 0x9E, 0xE5, 0x9E])

        state = run_steps(state)
        assert state.pc == 0x202

        state = state.replace(keypad=state.keypad.at[0x6].set(True))
        state = run_steps(state)
        assert state.pc == 0x206

    def test_skip_if_key_not_pressed(self, fresh_state):
        """EXA1 - Skips only while key VX is up."""
        state = execute(fresh_state, 0x6506)  # V5 = 6
        state = with_program(state, [0xE5, 0xA1, 0xE5, 0xA1])

        state = state.replace(keypad=state.keypad.at[0x6].set(True))
        state = run_steps(state)
        assert state.pc == 0x202

        state = state.replace(keypad=state.keypad.at[0x6].set(False))
        state = run_steps(state)
        assert state.pc == 0x206

    def test_key_index_out_of_range_faults(self, fresh_state):
        """EX9E - A key index above 0xF is a keypad fault."""
        state = execute(fresh_state, 0x6510)  # V5 = 0x10
        state = run_steps(with_program(state, [0xE5, 0x9E]))

        assert state.fault == Fault.KEYPAD
        assert state.fault_address == 0x10

    def test_undefined_key_instruction(self, fresh_state):
        """EX00 - Undefined, no skip."""
        state = state_with_all_keys(fresh_state)
        state = run_steps(with_program(state, [0xE0, 0x00]))
        assert state.pc == 0x202


def state_with_all_keys(state):
    return state.replace(keypad=jnp.ones_like(state.keypad))
