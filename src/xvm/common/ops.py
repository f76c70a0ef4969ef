''' Instruction and register tables '''

from types import MappingProxyType

from xvm.common.hwconf import REGISTER_COUNT

# Moves
MOVR = 10  # R2 -> R1
MOVV = 11  # V2 -> R1

# Arithmetic
ADD = 20  # R1 + R2 -> R1
SUB = 21  # R1 - R2 -> R1

# Stack
PUSH = 30  # R1 -> [SP++]
POP = 31  # [--SP] -> R1, 0 on empty stack

# Flow
JP = 40  # goto A1
JL = 41  # if R1 .lt R2 goto A3
CALL = 42  # push PC + 2; goto A1
RET = 50  # goto [--SP], 0 on empty stack

# Devices
PRINT = 60  # R1 -> text output
DRAW = 61  # screen[R1, R2] = R3 & 0xFF
CLS = 62  # clear screen
SLP = 70  # sleep V1 ms

HLT = 255

UNRESOLVED = -1
UNKNOWN = 'UNKNOWN'

INSTRUCTIONS = MappingProxyType({
    'MOVR': MOVR,
    'MOVV': MOVV,
    'ADD': ADD,
    'SUB': SUB,
    'PUSH': PUSH,
    'POP': POP,
    'JP': JP,
    'JL': JL,
    'CALL': CALL,
    'RET': RET,
    'PRINT': PRINT,
    'DRAW': DRAW,
    'CLS': CLS,
    'SLP': SLP,
    'HALT': HLT,
})

MNEMONICS = MappingProxyType({op: name for name, op in INSTRUCTIONS.items()})

# Operand kinds: r - register, v - value, a - address
SIGNATURES = MappingProxyType({
    MOVR: 'rr',
    MOVV: 'rv',
    ADD: 'rr',
    SUB: 'rr',
    PUSH: 'r',
    POP: 'r',
    JP: 'a',
    JL: 'rra',
    CALL: 'a',
    RET: '',
    PRINT: 'r',
    DRAW: 'rrr',
    CLS: '',
    SLP: 'v',
    HLT: '',
})

ARITY = MappingProxyType({op: len(sig) for op, sig in SIGNATURES.items()})

REGISTER_PREFIX = 'R'

REGISTERS = MappingProxyType({
    f'{REGISTER_PREFIX}{i}': i for i in range(REGISTER_COUNT)
})


def opcode_of(mnemonic: str) -> int:
    return INSTRUCTIONS.get(mnemonic.upper(), UNRESOLVED)


def register_index_of(name: str) -> int:
    return REGISTERS.get(name, UNRESOLVED)


def mnemonic_of(opcode: int) -> str:
    return MNEMONICS.get(opcode, UNKNOWN)


def arity_of(opcode: int) -> int | None:
    return ARITY.get(opcode)


def is_register(index: int) -> bool:
    return 0 <= index < REGISTER_COUNT


def signature_of(opcode: int) -> str | None:
    return SIGNATURES.get(opcode)
