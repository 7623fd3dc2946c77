#!/usr/bin/env python3

"""
Instruction Decoder

Turns a 16-bit opcode word into an Instruction: one of the Op members below,
plus the operand fields pulled out of the word.  Every opcode either decodes
to exactly one Op, or is rejected with UnknownOpcodeError.  Nothing falls
through silently.

The first nibble picks the family.  Several families pack more than one
instruction behind the same leading nibble, and are told apart by:

    0     the whole word         (00E0, 00EE)
    5, 9  the last nibble        (5XY0, 9XY0)
    8     the last nibble        (8XY0 - 8XYE)
    E, F  the low byte           (EX9E, FX07, FX65, ...)

Operand fields follow the usual naming:

    x, y = register numbers (0-F) from the second and third nibbles
    n    = last nibble
    nn   = low byte
    nnn  = low 12 bits (an address)
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from enum import Enum


class UnknownOpcodeError(Exception):
    def __init__(self, opcode, address=None):
        self.opcode = opcode
        self.address = address

        if address is None:
            message = "Opcode 0x{:04x} is not a CHIP-8 instruction".format(opcode)
        else:
            message = "Opcode 0x{:04x} at address 0x{:03x} is not a CHIP-8 instruction".format(opcode, address)

        super().__init__(message)


class Op(Enum):
    # Value is the mnemonic format, filled in from the Instruction fields
    CLS = "CLS"
    RET = "RET"
    JP = "JP 0x{nnn:03x}"
    CALL = "CALL 0x{nnn:03x}"
    SE_BYTE = "SE V{x:01x}, 0x{nn:02x}"
    SNE_BYTE = "SNE V{x:01x}, 0x{nn:02x}"
    SE_REG = "SE V{x:01x}, V{y:01x}"
    LD_BYTE = "LD V{x:01x}, 0x{nn:02x}"
    ADD_BYTE = "ADD V{x:01x}, 0x{nn:02x}"
    LD_REG = "LD V{x:01x}, V{y:01x}"
    OR = "OR V{x:01x}, V{y:01x}"
    AND = "AND V{x:01x}, V{y:01x}"
    XOR = "XOR V{x:01x}, V{y:01x}"
    ADD_REG = "ADD V{x:01x}, V{y:01x}"
    SUB = "SUB V{x:01x}, V{y:01x}"
    SHR = "SHR V{x:01x}"
    SUBN = "SUBN V{x:01x}, V{y:01x}"
    SHL = "SHL V{x:01x}"
    SNE_REG = "SNE V{x:01x}, V{y:01x}"
    LD_I = "LD I, 0x{nnn:03x}"
    JP_V0 = "JP V0, 0x{nnn:03x}"
    RND = "RND V{x:01x}, 0x{nn:02x}"
    DRW = "DRW V{x:01x}, V{y:01x}, 0x{n:01x}"
    SKP = "SKP V{x:01x}"
    SKNP = "SKNP V{x:01x}"
    LD_VX_DT = "LD V{x:01x}, DT"
    LD_VX_K = "LD V{x:01x}, K"
    LD_DT_VX = "LD DT, V{x:01x}"
    LD_ST_VX = "LD ST, V{x:01x}"
    ADD_I = "ADD I, V{x:01x}"
    LD_F = "LD F, V{x:01x}"
    LD_B = "LD B, V{x:01x}"
    LD_MEM_VX = "LD [I], V{x:01x}"
    LD_VX_MEM = "LD V{x:01x}, [I]"


class Instruction(namedtuple("Instruction", ["op", "opcode", "x", "y", "n", "nn", "nnn"])):
    __slots__ = ()

    def __str__(self):
        return self.op.value.format(x=self.x, y=self.y, n=self.n, nn=self.nn, nnn=self.nnn)


# Families with a single instruction behind the first nibble
SINGLE_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW
}

# Shared families, keyed by (first nibble, distinguishing bits)
WORD_OPS = {
    0x00E0: Op.CLS,
    0x00EE: Op.RET
}

NIBBLE_OPS = {
    (0x5, 0x0): Op.SE_REG,
    (0x8, 0x0): Op.LD_REG,
    (0x8, 0x1): Op.OR,
    (0x8, 0x2): Op.AND,
    (0x8, 0x3): Op.XOR,
    (0x8, 0x4): Op.ADD_REG,
    (0x8, 0x5): Op.SUB,
    (0x8, 0x6): Op.SHR,
    (0x8, 0x7): Op.SUBN,
    (0x8, 0xE): Op.SHL,
    (0x9, 0x0): Op.SNE_REG
}

BYTE_OPS = {
    (0xE, 0x9E): Op.SKP,
    (0xE, 0xA1): Op.SKNP,
    (0xF, 0x07): Op.LD_VX_DT,
    (0xF, 0x0A): Op.LD_VX_K,
    (0xF, 0x15): Op.LD_DT_VX,
    (0xF, 0x18): Op.LD_ST_VX,
    (0xF, 0x1E): Op.ADD_I,
    (0xF, 0x29): Op.LD_F,
    (0xF, 0x33): Op.LD_B,
    (0xF, 0x55): Op.LD_MEM_VX,
    (0xF, 0x65): Op.LD_VX_MEM
}


def decode(opcode, address=None):
    # 'address' is only used to report where a bad opcode came from
    family = (opcode & 0xF000) >> 12

    if family == 0x0:
        op = WORD_OPS.get(opcode)
    elif family in (0x5, 0x8, 0x9):
        op = NIBBLE_OPS.get((family, opcode & 0xF))
    elif family in (0xE, 0xF):
        op = BYTE_OPS.get((family, opcode & 0xFF))
    else:
        op = SINGLE_OPS[family]

    if op is None:
        raise UnknownOpcodeError(opcode, address)

    return Instruction(
        op,
        opcode,
        (opcode & 0xF00) >> 8,
        (opcode & 0xF0) >> 4,
        opcode & 0xF,
        opcode & 0xFF,
        opcode & 0xFFF
    )
