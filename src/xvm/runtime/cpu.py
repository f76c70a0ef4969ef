import time
import logging as lg
from typing import Callable, Sequence

import xvm.common.ops as ops
from xvm.common.hwconf import REGISTER_COUNT, INT32_MIN
from xvm.runtime.screen import Display, Screen


class Halt(Exception):
    pass


class Fault(Exception):
    ''' Fatal execution error. Halts the machine '''

    pc: int

    def __init__(self, message: str, pc: int):
        super().__init__(message)
        self.pc = pc


class UnknownOpcode(Fault):
    opcode: int

    def __init__(self, opcode: int, pc: int):
        super().__init__(
            f'Unknown instruction: {opcode}({ops.mnemonic_of(opcode)}) at {pc}',
            pc
        )
        self.opcode = opcode


class OperandError(Fault):
    pass


def int32(value: int) -> int:
    return (value - INT32_MIN) % 2**32 + INT32_MIN


class CPU():
    pc: int  # Program counter
    gp: list[int]  # General purpose registers
    stack: list[int]  # Shared by data and return addresses
    program: list[int]
    halted: bool
    output: str  # Accumulated PRINT output
    error: Fault | None  # Last fault, None after a clean halt

    def __init__(
        self,
        screen: Display | None = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.screen = screen if screen is not None else Screen()
        self.sleep = sleep

        self.gp = [0] * REGISTER_COUNT
        self.stack = []
        self.program = []
        self.pc = 0
        self.halted = False
        self.output = ''
        self.error = None
        self.start = 0  # Position of the instruction being executed

    def init(
        self,
        program: Sequence[int],
        output: str | None = None,
        reset_registers: bool = False
    ):
        lg.info('Initializing VM')

        self.program = list(program)
        self.output = output or ''
        self.pc = 0
        self.halted = False
        self.error = None
        self.stack.clear()
        self.screen.clear()

        if reset_registers:
            self.gp = [0] * REGISTER_COUNT

    # - Helpers - #

    def debug_dump(self):
        state = [f'PC:{self.pc}', f'SP:{len(self.stack)}']
        state.extend([f'R{i}:{self.gp[i]}' for i in range(len(self.gp))])
        lg.debug(' '.join(state))

    def in_bounds(self) -> bool:
        return 0 <= self.pc < len(self.program)

    def current_instruction(self) -> str:
        if not self.in_bounds():
            return ops.UNKNOWN

        return ops.mnemonic_of(self.program[self.pc])

    def next(self) -> int:
        if not self.in_bounds():
            raise OperandError(f'Truncated instruction at {self.start}', self.start)

        word = self.program[self.pc]
        self.pc += 1
        return word

    def next_reg(self) -> int:
        index = self.next()

        if not ops.is_register(index):
            raise OperandError(f'Invalid register {index} at {self.start}', self.start)

        return index

    def get_next_gp(self) -> int:
        return self.gp[self.next_reg()]

    def arithm_pair(self, op: Callable[[int, int], int]):
        dst = self.next_reg()
        src = self.get_next_gp()
        self.gp[dst] = int32(op(self.gp[dst], src))

    def do_pop(self) -> int:
        if not self.stack:
            return 0

        return self.stack.pop()

    # - Operations - #

    def movr(self):
        dst = self.next_reg()
        self.gp[dst] = self.get_next_gp()

    def movv(self):
        dst = self.next_reg()
        self.gp[dst] = int32(self.next())

    def add(self):
        self.arithm_pair(lambda a, b: a + b)

    def sub(self):
        self.arithm_pair(lambda a, b: a - b)

    def push(self):
        self.stack.append(self.get_next_gp())

    def pop(self):
        dst = self.next_reg()
        self.gp[dst] = self.do_pop()

    def jp(self):
        self.pc = self.next()

    def jl(self):
        a = self.get_next_gp()
        b = self.get_next_gp()
        addr = self.next()

        if a < b:
            self.pc = addr

    def call(self):
        addr = self.next()
        self.stack.append(self.pc)
        self.pc = addr

    def ret(self):
        self.pc = self.do_pop()

    def prn(self):
        val = self.get_next_gp()
        self.output += str(val)
        # Debug mirror
        print(val)

    def draw(self):
        x = self.get_next_gp()
        y = self.get_next_gp()
        color = self.get_next_gp() & 0xFF

        if not (0 <= x < self.screen.width and 0 <= y < self.screen.height):
            raise OperandError(f'Pixel ({x}, {y}) is off screen at {self.start}', self.start)

        self.screen.set_pixel(x, y, color)

    def cls(self):
        self.screen.clear()

    def slp(self):
        ms = self.next()
        self.sleep(max(ms, 0) / 1000)

    def hlt(self):
        raise Halt()

    HANDLERS = {
        ops.MOVR: movr,
        ops.MOVV: movv,
        ops.ADD: add,
        ops.SUB: sub,
        ops.PUSH: push,
        ops.POP: pop,
        ops.JP: jp,
        ops.JL: jl,
        ops.CALL: call,
        ops.RET: ret,
        ops.PRINT: prn,
        ops.DRAW: draw,
        ops.CLS: cls,
        ops.SLP: slp,
        ops.HLT: hlt
    }

    # -- Implementation -- #

    def exec_next(self):
        op = self.next()
        handler = self.HANDLERS.get(op)

        if handler is None:
            raise UnknownOpcode(op, self.start)

        handler(self)

    def step(self):
        if self.halted:
            lg.info('Program halted')
            return

        if not self.in_bounds():
            lg.warning('Program counter out of bounds')
            self.halted = True
            return

        self.start = self.pc

        try:
            self.exec_next()

        except Halt:
            lg.info('Program halted')
            self.halted = True

        except Fault as e:
            lg.error(str(e))
            self.pc = self.start
            self.error = e
            self.halted = True

        if not self.halted and not self.in_bounds():
            lg.warning('Program counter out of bounds')
            self.halted = True

    def run(self, max_steps: int | None = None, flush: bool = True) -> int:
        ''' Steps until halted, flushing the screen after every step.
            Returns the number of executed steps '''

        lg.info(f'Running {len(self.program)} words')
        steps = 0

        while not self.halted:
            if max_steps is not None and steps >= max_steps:
                lg.warning(f'Step limit {max_steps} reached at {self.pc}')
                break

            self.step()
            steps += 1

            if flush:
                self.screen.update()

        return steps
