from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out

import float32
from aligner import Aligner
from carry_select_adder import CarrySelectAddSub
from float32 import EXP_WIDTH, GRS_WIDTH, SIGNIFICAND_WIDTH
from parallel_prefix import KoggeStoneAdder
from rounder import Rounder

FULL_WIDTH = SIGNIFICAND_WIDTH + GRS_WIDTH


class FAddFarPath(wiring.Component):
    """binary32 add/subtract for exponent differences of 2 or more

    With the smaller operand at least two binades down, subtraction cancels
    at most one leading bit, so normalization is a single shift either way
    and the result keeps the bigger operand's sign.

    Requires exponent(bigger) >= exponent(smaller) and exp_diff >= 2.
    """

    bigger: In(32)
    smaller: In(32)
    op: In(1)
    exp_diff: In(EXP_WIDTH)
    result: Out(32)

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        m.submodules.aligner = aligner = Aligner(width=SIGNIFICAND_WIDTH)
        m.submodules.mant_addsub = mant_addsub = CarrySelectAddSub(width=FULL_WIDTH, block_size=6)
        m.submodules.rounder = rounder = Rounder(width=SIGNIFICAND_WIDTH)
        m.submodules.exp_add = exp_add = KoggeStoneAdder(width=EXP_WIDTH)

        bigger_sign = float32.sign(self.bigger)
        bigger_exp = float32.exponent(self.bigger)
        smaller_sign = float32.sign(self.smaller)

        far_op = Signal()
        m.d.comb += far_op.eq(bigger_sign ^ smaller_sign ^ self.op)

        # ---- Alignment ----
        bigger_full = Signal(FULL_WIDTH)
        m.d.comb += bigger_full.eq(Cat(Const(0, GRS_WIDTH), float32.significand(self.bigger)))

        m.d.comb += aligner.value_in.eq(float32.significand(self.smaller))
        m.d.comb += aligner.shift_amount.eq(self.exp_diff)

        smaller_full = Signal(FULL_WIDTH)
        m.d.comb += smaller_full.eq(
            Cat(aligner.sticky, aligner.round_bit, aligner.guard, aligner.value_out)
        )

        # ---- Add / Subtract ----
        m.d.comb += mant_addsub.a.eq(bigger_full)
        m.d.comb += mant_addsub.b.eq(smaller_full)
        m.d.comb += mant_addsub.subtract.eq(far_op)

        total = mant_addsub.sum
        carry = mant_addsub.carry_out

        # ---- First Normalization ----
        shift_right = Signal()
        shift_left = Signal()
        m.d.comb += shift_right.eq(~far_op & carry)
        m.d.comb += shift_left.eq(far_op & ~total[FULL_WIDTH - 1])

        regularized = Signal(FULL_WIDTH)
        with m.If(shift_left):
            m.d.comb += regularized.eq(total << 1)
        with m.Elif(shift_right):
            # displaced round/sticky fold into the new sticky
            m.d.comb += regularized.eq(Cat(total[0:2].any(), total[2:], carry))
        with m.Else():
            m.d.comb += regularized.eq(total)

        # ---- Rounding ----
        m.d.comb += rounder.mantissa_in.eq(regularized[GRS_WIDTH:])
        m.d.comb += rounder.guard.eq(regularized[2])
        m.d.comb += rounder.round_bit.eq(regularized[1])
        m.d.comb += rounder.sticky.eq(regularized[0])

        # ---- Second Normalization ----
        normalized = Signal(SIGNIFICAND_WIDTH + 1)
        m.d.comb += normalized.eq(Cat(rounder.mantissa_out, rounder.overflow) >> rounder.overflow)

        # ---- Exponent ----
        exp_adjustment = Signal(signed(2))
        with m.If(shift_right):
            m.d.comb += exp_adjustment.eq(1)
        with m.Elif(shift_left):
            m.d.comb += exp_adjustment.eq(-1)
        with m.Else():
            m.d.comb += exp_adjustment.eq(0)

        m.d.comb += exp_add.a.eq(bigger_exp)
        m.d.comb += exp_add.b.eq(exp_adjustment)
        m.d.comb += exp_add.carry_in.eq(rounder.overflow)

        m.d.comb += self.result.eq(
            float32.pack(bigger_sign, exp_add.sum, normalized[0 : float32.MANTISSA_WIDTH])
        )

        return m
