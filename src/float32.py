import struct

from amaranth import *

SIGN_BIT = 31
EXP_LOW = 23
EXP_WIDTH = 8
MANTISSA_WIDTH = 23
SIGNIFICAND_WIDTH = MANTISSA_WIDTH + 1
GRS_WIDTH = 3
BIAS = 127


# Field accessors over a 32-bit amaranth value.


def sign(word):
    return word[SIGN_BIT]


def exponent(word):
    return word[EXP_LOW:SIGN_BIT]


def mantissa(word):
    return word[0:EXP_LOW]


def significand(word):
    """Mantissa with the hidden bit restored: 24 bits in [1.0, 2.0)"""
    return Cat(mantissa(word), Const(1, 1))


def pack(sign, exponent, mantissa):
    return Cat(mantissa, exponent, sign)


class F32:
    """Software helper for binary32 words (1 sign + 8 exponent + 23 mantissa)"""

    def __init__(self, bits: int):
        self.bits = bits

    @classmethod
    def from_float(cls, f: float):
        bits = struct.unpack(">I", struct.pack(">f", f))[0]
        return cls(bits)

    @classmethod
    def from_bits(cls, bits: int):
        return cls(bits)

    def to_bits(self) -> int:
        return self.bits

    def to_float(self) -> float:
        return struct.unpack(">f", struct.pack(">I", self.bits))[0]

    def unpack(self) -> tuple[int, int, int]:
        sign = (self.bits >> SIGN_BIT) & 0x1
        exp = (self.bits >> EXP_LOW) & 0xFF
        mant = self.bits & 0x7FFFFF
        return sign, exp, mant

    @classmethod
    def pack(cls, sign: int, exp: int, mant: int):
        bits = (sign << SIGN_BIT) | (exp << EXP_LOW) | mant
        return cls(bits)

    def flip_sign(self):
        return F32(self.bits ^ (1 << SIGN_BIT))

    def is_normal(self) -> bool:
        _, exp, _ = self.unpack()
        return 0 < exp < 0xFF

    def __eq__(self, other):
        return isinstance(other, F32) and self.bits == other.bits

    def __hash__(self):
        return hash(self.bits)

    def __repr__(self):
        return f"F32(0x{self.bits:08X})"
