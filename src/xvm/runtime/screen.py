import time
from typing import Callable, Protocol, Sequence

from xvm.common.hwconf import (
    SCREEN_WIDTH, SCREEN_HEIGHT, PALETTE_SIZE, REFRESH_INTERVAL_MS
)

Frame = list[int]  # 0xRRGGBB per pixel, row-major
FlushCallback = Callable[[Frame, int, int], None]

# Darkest to brightest
SHADES = ' .:-=+*#%@'


class Display(Protocol):
    width: int
    height: int

    def set_pixel(self, x: int, y: int, palette_index: int):
        ...

    def clear(self):
        ...

    def update(self) -> bool:
        ...


def grayscale_palette() -> list[int]:
    return [(i << 16) | (i << 8) | i for i in range(PALETTE_SIZE)]


def shade(rgb: int) -> str:
    level = (((rgb >> 16) & 0xFF) + ((rgb >> 8) & 0xFF) + (rgb & 0xFF)) // 3
    return SHADES[level * len(SHADES) // 256]


class Screen:
    ''' Palette-indexed framebuffer with a rate-limited flush '''

    width: int
    height: int
    fb: bytearray
    palette: list[int]

    def __init__(
        self,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
        refresh_ms: int = REFRESH_INTERVAL_MS,
        on_flush: FlushCallback | None = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.width = width
        self.height = height
        self.fb = bytearray(width * height)
        self.palette = grayscale_palette()
        self.refresh_interval = refresh_ms / 1000
        self.on_flush = on_flush
        self.clock = clock
        self.last_flush: float | None = None
        self.flushes = 0
        self.open = True

    def set_pixel(self, x: int, y: int, palette_index: int):
        self.fb[y * self.width + x] = palette_index & 0xFF

    def get_pixel(self, x: int, y: int) -> int:
        return self.fb[y * self.width + x]

    def clear(self):
        self.fb[:] = bytes(len(self.fb))

    def set_palette(self, palette: Sequence[int]):
        if len(palette) != PALETTE_SIZE:
            raise UserWarning(f'Palette must have {PALETTE_SIZE} entries, got {len(palette)}')

        self.palette = list(palette)

    def is_open(self) -> bool:
        return self.open

    def close(self):
        self.open = False

    def frame(self) -> Frame:
        return [self.palette[p] for p in self.fb]

    def update(self) -> bool:
        ''' Flushes the frame unless the last flush is younger than the refresh interval '''

        now = self.clock()

        if self.last_flush is not None and now - self.last_flush < self.refresh_interval:
            return False

        self.last_flush = now
        self.flushes += 1

        if self.on_flush is not None:
            self.on_flush(self.frame(), self.width, self.height)

        return True

    def render_text(self) -> str:
        ''' Framebuffer as text, one character per pixel, shaded by palette brightness '''

        lines = []

        for y in range(self.height):
            row = self.fb[y * self.width:(y + 1) * self.width]
            lines.append(''.join(shade(self.palette[p]) for p in row).rstrip())

        while lines and not lines[-1]:
            lines.pop()

        return '\n'.join(lines)
