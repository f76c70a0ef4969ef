import sys
import time
from pathlib import Path
import logging as lg
import traceback
from typing import Callable, Sequence

import click

from xvm.common.hwconf import MachineConfig, load_config
from xvm.common.logconf import setup_logging
from xvm.runtime.screen import Display, Screen
import xvm.runtime.cpu as cpu
import xvm.xasm.asm as asm


EXIT_HALT = 0
EXIT_FAULT = 2
EXIT_KEYBOARD = 3
EXIT_STEP_LIMIT = 4
EXIT_EXEC_ERROR = 100


def execute(
    bytecode: Sequence[int],
    config: MachineConfig | None = None,
    screen: Display | None = None,
    sleep: Callable[[float], None] = time.sleep,
    max_steps: int | None = None
) -> cpu.CPU:
    if config is None:
        config = MachineConfig()

    if screen is None:
        screen = Screen(config.screen_width, config.screen_height, config.refresh_ms)

    proc = cpu.CPU(screen, sleep)
    proc.init(bytecode)
    proc.run(max_steps)
    return proc


def exit_code(proc: cpu.CPU) -> int:
    if not proc.halted:
        lg.info('Execution stopped by the step limit')
        return EXIT_STEP_LIMIT

    if proc.error is not None:
        lg.info(f'Execution halted on fault: {proc.error}')
        return EXIT_FAULT

    lg.info('Execution halted gracefully')
    return EXIT_HALT


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('-c', '--config', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Machine configuration file (TOML)')
@click.option('--refresh-ms', type=int, help='Minimal interval between screen flushes')
@click.option('--max-steps', type=int, help='Stops after this many steps')
@click.option('--show-screen', is_flag=True, help='Prints the framebuffer on exit')
@click.argument('source', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def run(
    verbose: bool,
    config: Path | None,
    refresh_ms: int | None,
    max_steps: int | None,
    show_screen: bool,
    source: Path
):
    setup_logging(verbose)
    lg.info("XVM")

    try:
        machine = load_config(config) if config else MachineConfig()
        machine.update(refresh_ms=refresh_ms)

        lg.info(f'Assembling file: {source}')
        bytecode = asm.assemble(source.read_text())
        lg.info(f'Bytecode: {bytecode}')

        proc = execute(bytecode, machine, max_steps=max_steps)
        proc.debug_dump()

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        sys.exit(EXIT_KEYBOARD)

    except Exception as e:
        lg.error(f'Execution halted on general error {e}')
        traceback.print_exc()
        sys.exit(EXIT_EXEC_ERROR)

    if show_screen:
        click.echo(proc.screen.render_text())

    sys.exit(exit_code(proc))


if __name__ == '__main__':
    run()
