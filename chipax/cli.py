"""Command line host: load a CHIP-8 program image and run it headless."""

import argparse
import sys
from typing import List, Optional

from chipax.config import RunConfig
from chipax.errors import MachineFault, ProgramTooLargeError
from chipax.logging import logger, progress, set_log_level
from chipax.machine import Machine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chipax",
        description="Run a CHIP-8 program image. Tune with CHIPAX_CYCLES, "
                    "CHIPAX_SEED, CHIPAX_LOG_LEVEL and CHIPAX_SHOW_PROGRESS.",
    )
    parser.add_argument("program", help="Path to a raw CHIP-8 program image")
    return parser


def run(machine: Machine, cycles: int, show_progress: bool = True):
    """Step ``machine`` ``cycles`` times, stopping at the first fault."""
    for _ in progress(cycles, enabled=show_progress):
        machine.step()


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point. Returns the process exit status."""
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    if len(argv) != 1:
        parser.print_usage()
        return 0
    args = parser.parse_args(argv)

    try:
        config = RunConfig()
    except ValueError as e:
        logger.critical(f"Invalid configuration: {e}")
        return 1
    set_log_level(config.log_level)

    machine = Machine(seed=config.seed)
    try:
        machine.load_rom(args.program)
    except OSError as e:
        logger.critical(f"Could not read file {args.program}: {e}")
        return 1
    except ProgramTooLargeError as e:
        logger.critical(f"Could not load {args.program}: {e}")
        return 1
    logger.info(f"Loaded {args.program}")

    try:
        run(machine, config.cycles, config.show_progress)
    except MachineFault as e:
        logger.error(str(e))
        return 1

    if config.cycles:
        logger.info(f"Ran {config.cycles} cycles, pc=0x{machine.pc:03X}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
