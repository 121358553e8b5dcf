"""Tests for display operations (DXYN)."""

import jax.numpy as jnp
from chipax import execute, Fault, SCREEN_WIDTH
from conftest import setup_sprite_in_memory, with_program, run_steps


def row(display, y, x_start, width=4):
    start = y * SCREEN_WIDTH + x_start
    return [int(pixel) for pixel in display[start:start + width]]


class TestBasicSprites:
    """Test basic sprite drawing."""

    def test_basic_sprite_draw(self, fresh_state):
        """Test basic sprite drawing without collision."""
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xC0, 0xC0])

        state = execute(state, 0x600A)  # V0 = 10
        state = execute(state, 0x6105)  # V1 = 5
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xD012)

        assert row(state.display, 5, 10, 3) == [1, 1, 0]
        assert row(state.display, 6, 10, 3) == [1, 1, 0]
        assert jnp.sum(state.display) == 4
        assert state.V[15] == 0
        assert state.draw_flag

    def test_collision_detection(self, fresh_state):
        """Test collision flag when sprite overlaps existing pixels."""
        state = setup_sprite_in_memory(fresh_state, 0x400, [0x80])

        state = execute(state, 0x6014)  # V0 = 20
        state = execute(state, 0x610A)  # V1 = 10
        state = execute(state, 0xA400)  # I = 0x400

        state = execute(state, 0xD011)
        assert state.display[10 * SCREEN_WIDTH + 20] == 1
        assert state.V[15] == 0

        state = execute(state, 0xD011)
        assert state.display[10 * SCREEN_WIDTH + 20] == 0
        assert state.V[15] == 1

    def test_font_glyph_collision_then_clear_draw(self, fresh_state):
        """Draw glyph 8 over a lit pixel, then again at a free offset."""
        state = fresh_state.replace(display=fresh_state.display.at[3].set(1))
        state = execute(state, 0x6205)  # V2 = 5
        state = execute(state, 0xA028)  # I = 40, glyph "8"
        state = with_program(state, [0xD0, 0x15, 0xD2, 0x15])

        state = run_steps(state)
        assert row(state.display, 0, 0) == [1, 1, 1, 0]
        assert row(state.display, 1, 0) == [1, 0, 0, 1]
        assert row(state.display, 2, 0) == [1, 1, 1, 1]
        assert row(state.display, 3, 0) == [1, 0, 0, 1]
        assert row(state.display, 4, 0) == [1, 1, 1, 1]
        assert state.V[15] == 1

        state = run_steps(state)
        assert row(state.display, 0, 5) == [1, 1, 1, 1]
        assert row(state.display, 1, 5) == [1, 0, 0, 1]
        assert row(state.display, 2, 5) == [1, 1, 1, 1]
        assert row(state.display, 3, 5) == [1, 0, 0, 1]
        assert row(state.display, 4, 5) == [1, 1, 1, 1]
        assert state.V[15] == 0

    def test_display_values_stay_binary(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xFF] * 15)
        state = execute(state, 0xA300)
        for _ in range(3):
            state = execute(state, 0xD00F)
        assert set(jnp.unique(state.display).tolist()) <= {0, 1}


class TestBounds:
    """Test flat addressing and out-of-range faults."""

    def test_sprite_past_right_edge_continues_on_next_line(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xFF])
        state = execute(state, 0x603E)  # V0 = 62
        state = execute(state, 0xA300)
        state = execute(state, 0xD011)

        assert row(state.display, 0, 62, 2) == [1, 1]
        assert row(state.display, 1, 0, 7) == [1, 1, 1, 1, 1, 1, 0]
        assert state.fault == Fault.NONE

    def test_sprite_below_screen_faults(self, fresh_state):
        state = execute(fresh_state, 0x611F)  # V1 = 31
        state = execute(state, 0xA000)  # I = glyph "0"
        state = execute(state, 0xD012)

        assert state.fault == Fault.DISPLAY
        assert state.fault_address == 32 * SCREEN_WIDTH

    def test_blank_rows_below_screen_do_not_fault(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xFF, 0x00])
        state = execute(state, 0x611F)  # V1 = 31
        state = execute(state, 0xA300)
        state = execute(state, 0xD012)

        assert state.fault == Fault.NONE
        assert jnp.sum(state.display) == 8

    def test_sprite_rows_past_memory_fault(self, fresh_state):
        state = execute(fresh_state, 0xAFFE)
        state = execute(state, 0xD005)

        assert state.fault == Fault.MEMORY
        assert state.fault_address == 0x1000


class TestFlagRegisterCoordinates:
    """VF is cleared before the sprite position is read."""

    def test_flag_register_as_x(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x300, [0x80])
        state = execute(state, 0x6F0A)  # VF = 10
        state = execute(state, 0x6100)  # V1 = 0
        state = execute(state, 0xA300)
        state = execute(state, 0xDF11)

        assert jnp.nonzero(state.display)[0].tolist() == [0]
        assert state.V[15] == 0

    def test_flag_register_as_y(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0x300, [0x80])
        state = execute(state, 0x6F0A)  # VF = 10
        state = execute(state, 0x6103)  # V1 = 3
        state = execute(state, 0xA300)
        state = execute(state, 0xD1F1)

        assert jnp.nonzero(state.display)[0].tolist() == [3]
        assert state.V[15] == 0
