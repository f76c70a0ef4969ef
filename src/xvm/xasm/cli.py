from pathlib import Path
import logging as lg

import click

import xvm.xasm.asm as asm
from xvm.common.logconf import setup_logging


def collect_file(filepath: str | Path) -> str:
    if isinstance(filepath, str):
        filepath = Path(filepath)

    lg.debug(f'Collecting file {filepath}')
    return filepath.read_text()


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('-l', '--listing', is_flag=True, help='Prints a disassembly listing instead of raw words')
@click.argument('source', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def assemble(verbose: bool, listing: bool, source: Path):
    setup_logging(verbose)
    lg.info("XASM")

    lg.info(f'Assembling file: {source}')
    bytecode = asm.assemble(collect_file(source))

    if listing:
        for row in asm.disassemble(bytecode):
            click.echo(str(row))
    else:
        click.echo(' '.join(str(word) for word in bytecode))


if __name__ == "__main__":
    assemble()
