import logging as lg
from dataclasses import dataclass
from typing import Iterator, Sequence

import pyparsing as pp

import xvm.common.ops as ops
import xvm.xasm.grammar as grammar

Tokens = list[str]
Bytecode = list[int]


def strip_comma(token: str) -> str:
    ''' Register operands may carry a trailing comma '''

    if token.startswith(ops.REGISTER_PREFIX):
        return token.rstrip(',')

    return token


def get_tokens(code: str) -> list[Tokens]:
    ''' Drops comments and blank lines, splits the rest into uppercase tokens '''

    lines: list[Tokens] = []

    for text in code.split('\n'):
        tokens = grammar.line.parse_string(text.strip(), parse_all=True)
        if len(tokens) == 0:
            continue

        mnemonic, *operands = [str(t).upper() for t in tokens]
        lines.append([mnemonic] + [strip_comma(t) for t in operands])

    return lines


def parse_literal(token: str) -> int:
    try:
        (value,) = grammar.s_dec_const.parse_string(token, parse_all=True)
        return value

    except pp.ParseException:
        return ops.UNRESOLVED


def encode_token(position: int, token: str) -> int:
    if position == 0:
        return ops.opcode_of(token)

    if token.startswith(ops.REGISTER_PREFIX):
        return ops.register_index_of(token.split(',')[0])

    return parse_literal(token)


def get_bytecode(lines: Sequence[Tokens]) -> Bytecode:
    bytecode: Bytecode = []

    for line in lines:
        for position, token in enumerate(line):
            token = token.strip().upper()
            code = encode_token(position, token)

            if code == ops.UNRESOLVED:
                lg.debug(f'Unresolved token {token} at offset {len(bytecode)}')

            bytecode.append(code)

    return bytecode


def assemble(code: str) -> Bytecode:
    lines = get_tokens(code)
    lg.debug(f'Encoding {len(lines)} lines')
    return get_bytecode(lines)


@dataclass
class ListingRow:
    address: int
    opcode: int
    operands: list[int]

    @property
    def mnemonic(self) -> str:
        return ops.mnemonic_of(self.opcode)

    def __str__(self):
        signature = ops.signature_of(self.opcode) or ''
        words = [self.mnemonic if self.mnemonic != ops.UNKNOWN else str(self.opcode)]

        for kind, operand in zip(signature, self.operands):
            if kind == 'r':
                words.append(f'{ops.REGISTER_PREFIX}{operand}')
            else:
                words.append(str(operand))

        return f'{self.address:04d}: ' + ' '.join(words)


def disassemble(bytecode: Sequence[int]) -> Iterator[ListingRow]:
    ''' Walks the bytecode by opcode arity. Unknown opcodes take a single word '''

    address = 0

    while address < len(bytecode):
        opcode = bytecode[address]
        arity = ops.arity_of(opcode) or 0
        operands = list(bytecode[address + 1:address + 1 + arity])
        yield ListingRow(address, opcode, operands)
        address += 1 + arity
