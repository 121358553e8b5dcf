"""Run a tiny counter program with the host facade and the compiled engine."""

import time

import jax
import numpy as np

from chipax import Machine, create_state, load_program, run_n_steps

# V0 += 1, show its hex digit at (0, 0), clear, loop
PROGRAM = bytes([
    0x70, 0x01,  # 0x200: V0 += 1
    0x40, 0x10,  # 0x202: skip next if V0 != 0x10
    0x60, 0x00,  # 0x204: V0 = 0
    0x00, 0xE0,  # 0x206: clear screen
    0xF0, 0x29,  # 0x208: I = glyph V0
    0xD1, 0x15,  # 0x20A: draw at (V1, V1)
    0x12, 0x00,  # 0x20C: loop
])


def render(display: np.ndarray) -> str:
    rows = display.reshape(32, 64)[:5, :8]
    return "\n".join("".join("#" if pixel else "." for pixel in row) for row in rows)


if __name__ == "__main__":
    machine = Machine()
    machine.load(PROGRAM)
    for _ in range(6 * 3):
        machine.step()
    print(render(machine.display()))
    print("V0 =", machine.registers[0])

    state = load_program(create_state(jax.random.PRNGKey(0)), PROGRAM)
    start = time.time()
    state = jax.block_until_ready(run_n_steps(state, 70_000))
    print(f"70,000 cycles in {time.time() - start:.2f}s (including compilation), V0 = {int(state.V[0])}")
