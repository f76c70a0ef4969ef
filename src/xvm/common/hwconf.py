from dataclasses import dataclass, fields
from pathlib import Path
import logging as lg
import tomllib

REGISTER_COUNT = 10

SCREEN_WIDTH = 160
SCREEN_HEIGHT = 100
PALETTE_SIZE = 256

REFRESH_INTERVAL_MS = 16

INT32_MIN = -2**31
INT32_MAX = 2**31 - 1


@dataclass
class MachineConfig:
    screen_width: int = SCREEN_WIDTH
    screen_height: int = SCREEN_HEIGHT
    refresh_ms: int = REFRESH_INTERVAL_MS

    def update(self, **kwargs):
        for k, v in kwargs.items():
            if v is None:
                continue

            if k not in PARAMETERS:
                raise UserWarning(f'Unknown machine parameter {k}')

            setattr(self, k, int(v))

        return self


PARAMETERS = frozenset(f.name for f in fields(MachineConfig))


def load_config(path: str | Path) -> MachineConfig:
    ''' Reads the [machine] table of a TOML file '''

    if isinstance(path, str):
        path = Path(path)

    lg.debug(f'Loading machine config {path}')
    config = tomllib.loads(path.read_text())
    machine = config.get('machine', {})

    return MachineConfig().update(**machine)
