from pathlib import Path

import pytest
from click.testing import CliRunner

import xvm.runtime.emulator as emulator
from xvm.common.hwconf import MachineConfig, load_config
from xvm.xasm.cli import assemble

import unit_utils


def write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text)
    return path


def test_execute():
    proc = unit_utils.execute_source('MOVV R0 5\nMOVV R1 3\nADD R0 R1\nHALT')

    assert proc.halted
    assert proc.gp[0] == 8
    assert emulator.exit_code(proc) == emulator.EXIT_HALT


def test_execute_config():
    config = MachineConfig().update(screen_width=4, screen_height=4)
    proc = unit_utils.execute_source('MOVV R0 4\nDRAW R0 R0 R0\nHALT', config=config)

    assert emulator.exit_code(proc) == emulator.EXIT_FAULT


def test_execute_step_limit():
    proc = unit_utils.execute_source('JP 0', max_steps=10)

    assert emulator.exit_code(proc) == emulator.EXIT_STEP_LIMIT


def test_load_config(tmp_path):
    path = write(tmp_path, 'xvm.toml', '[machine]\nscreen_width = 32\nrefresh_ms = 40\n')
    config = load_config(path)

    assert config.screen_width == 32
    assert config.screen_height == MachineConfig().screen_height
    assert config.refresh_ms == 40


def test_load_config_unknown_key(tmp_path):
    path = write(tmp_path, 'xvm.toml', '[machine]\nregisters = 16\n')

    with pytest.raises(UserWarning):
        load_config(path)


def test_run_cli(tmp_path):
    source = write(tmp_path, 'prog.xasm', 'MOVV R0 2\nMOVV R1 40\nADD R0 R1\nPRINT R0\nHALT\n')
    result = CliRunner().invoke(emulator.run, [str(source)])

    assert result.exit_code == emulator.EXIT_HALT
    assert '42' in result.stdout


def test_run_cli_fault(tmp_path):
    source = write(tmp_path, 'bad.xasm', 'NOP\n')
    result = CliRunner().invoke(emulator.run, [str(source)])

    assert result.exit_code == emulator.EXIT_FAULT


def test_run_cli_show_screen(tmp_path):
    source = write(tmp_path, 'dot.xasm', 'MOVV R0 1\nMOVV R1 255\nDRAW R0 R0 R1\nHALT\n')
    config = write(tmp_path, 'xvm.toml', '[machine]\nscreen_width = 3\nscreen_height = 2\n')
    result = CliRunner().invoke(
        emulator.run,
        ['--config', str(config), '--show-screen', str(source)]
    )

    assert result.exit_code == emulator.EXIT_HALT
    assert result.stdout.endswith('\n @\n')


def test_run_cli_max_steps(tmp_path):
    source = write(tmp_path, 'loop.xasm', 'JP 0\n')
    result = CliRunner().invoke(emulator.run, ['--max-steps', '5', str(source)])

    assert result.exit_code == emulator.EXIT_STEP_LIMIT


def test_assemble_cli(tmp_path):
    source = write(tmp_path, 'add.xasm', 'ADD R0, R1 // sum\nHALT\n')
    result = CliRunner().invoke(assemble, [str(source)])

    assert result.exit_code == 0
    assert result.stdout == '20 0 1 255\n'


def test_assemble_cli_listing(tmp_path):
    source = write(tmp_path, 'add.xasm', 'ADD R0, R1\nHALT\n')
    result = CliRunner().invoke(assemble, ['--listing', str(source)])

    assert result.exit_code == 0
    assert result.stdout == '0000: ADD R0 R1\n0003: HALT\n'
