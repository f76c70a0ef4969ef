# type: ignore
import pytest

import xvm.runtime.cpu as cpu
from xvm.runtime.screen import Screen

from unit_utils import SleepRecorder


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms / 1000


@pytest.fixture
def clock():
    yield FakeClock()


@pytest.fixture
def screen(clock):
    yield Screen(width=16, height=8, refresh_ms=16, clock=clock)


@pytest.fixture
def sleeps():
    yield SleepRecorder()


@pytest.fixture
def proc(screen, sleeps):
    yield cpu.CPU(screen, sleeps)
