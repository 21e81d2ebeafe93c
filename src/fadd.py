from amaranth import *
from amaranth.build import Platform
from amaranth.lib import enum, wiring
from amaranth.lib.wiring import In, Out

import float32
from close_path import FAddClosePath
from exp_diff import ExponentDifference
from far_path import FAddFarPath


class AddPath(enum.Enum, shape=1):
    CLOSE = 0
    FAR = 1


class FAdd(wiring.Component):
    """binary32 adder/subtractor: result = a + b (op=0) or a - b (op=1)

    Orders the operands by exponent, routes |exp(a) - exp(b)| >= 2 to the
    far path and 0/1 to the close path, and restores the sign of a - b
    when the operands were swapped for a subtraction.

    Operands must be normalized finite numbers; zero, subnormal, infinity
    and NaN inputs produce an unspecified word.
    """

    a: In(32)
    b: In(32)
    op: In(1)
    result: Out(32)
    path: Out(AddPath)

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        m.submodules.exp_diff = exp_diff = ExponentDifference()
        m.submodules.far = far = FAddFarPath()
        m.submodules.close = close = FAddClosePath()

        # ---- Operand Ordering ----
        m.d.comb += exp_diff.a_exp.eq(float32.exponent(self.a))
        m.d.comb += exp_diff.b_exp.eq(float32.exponent(self.b))

        bigger = Signal(32)
        smaller = Signal(32)

        with m.If(exp_diff.swap):
            m.d.comb += bigger.eq(self.b)
            m.d.comb += smaller.eq(self.a)
        with m.Else():
            m.d.comb += bigger.eq(self.a)
            m.d.comb += smaller.eq(self.b)

        # ---- Path Selection ----
        with m.If(exp_diff.diff >= 2):
            m.d.comb += self.path.eq(AddPath.FAR)
        with m.Else():
            m.d.comb += self.path.eq(AddPath.CLOSE)

        for adder in (far, close):
            m.d.comb += adder.bigger.eq(bigger)
            m.d.comb += adder.smaller.eq(smaller)
            m.d.comb += adder.op.eq(self.op)
            m.d.comb += adder.exp_diff.eq(exp_diff.diff)

        path_result = Signal(32)
        with m.Switch(self.path):
            with m.Case(AddPath.FAR):
                m.d.comb += path_result.eq(far.result)
            with m.Case(AddPath.CLOSE):
                m.d.comb += path_result.eq(close.result)

        # ---- Sign Correction ----
        # a - b = -(b - a)
        flip_sign = Signal()
        m.d.comb += flip_sign.eq(exp_diff.swap & self.op)

        m.d.comb += self.result.eq(
            Cat(path_result[0 : float32.SIGN_BIT], float32.sign(path_result) ^ flip_sign)
        )

        return m
