from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out

import float32
from float32 import EXP_WIDTH, MANTISSA_WIDTH, SIGNIFICAND_WIDTH
from lza import LeadingZeroAnticipator
from normalizer import Normalizer
from parallel_prefix import KoggeStoneAdder, KoggeStoneAddSub
from rounder import Rounder

# hidden bit + 23 mantissa bits + one bit for the one-position alignment
WORK_WIDTH = SIGNIFICAND_WIDTH + 1


class FAddClosePath(wiring.Component):
    """binary32 add/subtract for exponent differences of 0 or 1

    Subtraction here can cancel any number of leading bits. The shift amount
    comes from two leading-zero anticipators running beside the subtractor,
    one per operand order, and the subtractor's carry-out picks the one that
    matches the actual sign of the difference.

    Rounding happens before normalization: only an addition or a
    subtraction without cancellation has a bit to round away, and both of
    those need no left shift. A cancelling subtraction is exact.

    Requires exponent(bigger) >= exponent(smaller) and exp_diff in {0, 1}.
    """

    bigger: In(32)
    smaller: In(32)
    op: In(1)
    exp_diff: In(EXP_WIDTH)
    result: Out(32)

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        m.submodules.mant_addsub = mant_addsub = KoggeStoneAddSub(width=WORK_WIDTH)
        m.submodules.lza_ab = lza_ab = LeadingZeroAnticipator(width=WORK_WIDTH)
        m.submodules.lza_ba = lza_ba = LeadingZeroAnticipator(width=WORK_WIDTH)
        m.submodules.rounder = rounder = Rounder(width=SIGNIFICAND_WIDTH)
        m.submodules.normalizer = normalizer = Normalizer(width=WORK_WIDTH)
        m.submodules.exp_add = exp_add = KoggeStoneAdder(width=EXP_WIDTH)

        bigger_sign = float32.sign(self.bigger)
        bigger_exp = float32.exponent(self.bigger)
        smaller_sign = float32.sign(self.smaller)

        close_op = Signal()
        m.d.comb += close_op.eq(bigger_sign ^ smaller_sign ^ self.op)

        # ---- Alignment ----
        bigger_sig = Signal(WORK_WIDTH)
        smaller_sig = Signal(WORK_WIDTH)

        m.d.comb += bigger_sig.eq(Cat(Const(0, 1), float32.significand(self.bigger)))
        m.d.comb += smaller_sig.eq(Cat(Const(0, 1), float32.significand(self.smaller)) >> self.exp_diff[0])

        # ---- Leading Zero Anticipation ----
        m.d.comb += lza_ab.a.eq(bigger_sig)
        m.d.comb += lza_ab.b.eq(smaller_sig)
        m.d.comb += lza_ba.a.eq(smaller_sig)
        m.d.comb += lza_ba.b.eq(bigger_sig)

        # ---- Add / Subtract ----
        m.d.comb += mant_addsub.a.eq(bigger_sig)
        m.d.comb += mant_addsub.b.eq(smaller_sig)
        m.d.comb += mant_addsub.subtract.eq(close_op)

        carry = mant_addsub.carry_out

        # smaller - bigger: only possible when the exponents tie
        sub_fix = Signal()
        m.d.comb += sub_fix.eq(close_op & (self.exp_diff == 0) & ~carry)

        magnitude = Signal(WORK_WIDTH)
        with m.If(sub_fix):
            m.d.comb += magnitude.eq(~mant_addsub.sum + 1)
        with m.Else():
            m.d.comb += magnitude.eq(mant_addsub.sum)

        lz_predicted = Signal(lza_ab.count_bits)
        with m.If(carry):
            m.d.comb += lz_predicted.eq(lza_ab.lz_count)
        with m.Else():
            m.d.comb += lz_predicted.eq(lza_ba.lz_count)

        # bit 25 only set by an addition carry
        value = Signal(WORK_WIDTH + 1)
        with m.If(close_op):
            m.d.comb += value.eq(magnitude)
        with m.Else():
            m.d.comb += value.eq(Cat(mant_addsub.sum, carry))

        is_zero = Signal()
        m.d.comb += is_zero.eq(close_op & ~magnitude.any())

        # ---- Rounding ----
        add_overflow = value[WORK_WIDTH]
        no_cancel = value[WORK_WIDTH - 1]

        with m.If(add_overflow):
            m.d.comb += rounder.mantissa_in.eq(value[2:])
            m.d.comb += rounder.guard.eq(value[1])
            m.d.comb += rounder.round_bit.eq(value[0])
        with m.Else():
            m.d.comb += rounder.mantissa_in.eq(value[1:WORK_WIDTH])
            m.d.comb += rounder.guard.eq(value[0] & no_cancel)
            m.d.comb += rounder.round_bit.eq(0)
        m.d.comb += rounder.sticky.eq(0)

        round_enable = Signal()
        m.d.comb += round_enable.eq(add_overflow | no_cancel)

        # a cancelling result keeps its low bit for the left shift
        rounded = Signal(WORK_WIDTH)
        m.d.comb += rounded.eq(Cat(value[0] & ~round_enable, rounder.mantissa_out))

        # ---- Normalization ----
        shift_enable = Signal()
        m.d.comb += shift_enable.eq(close_op & ~no_cancel)

        lz_shift = Signal(lza_ab.count_bits)
        with m.If(shift_enable):
            m.d.comb += lz_shift.eq(lz_predicted)
        with m.Else():
            m.d.comb += lz_shift.eq(0)

        m.d.comb += normalizer.value_in.eq(rounded)
        m.d.comb += normalizer.shift_amount.eq(lz_shift)

        # anticipation may be one short
        fix_prediction_enable = Signal()
        m.d.comb += fix_prediction_enable.eq(shift_enable & ~normalizer.top)

        shifted = Signal(WORK_WIDTH)
        with m.If(fix_prediction_enable):
            m.d.comb += shifted.eq(normalizer.value_out << 1)
        with m.Else():
            m.d.comb += shifted.eq(normalizer.value_out)

        # rounding carry: all-ones significand became a power of two
        normalized = Signal(WORK_WIDTH + 1)
        m.d.comb += normalized.eq(Cat(shifted, rounder.overflow) >> rounder.overflow)

        # ---- Exponent ----
        exp_adjustment = Signal(signed(7))
        m.d.comb += exp_adjustment.eq(add_overflow - lz_shift - fix_prediction_enable)

        m.d.comb += exp_add.a.eq(bigger_exp)
        m.d.comb += exp_add.b.eq(exp_adjustment)
        m.d.comb += exp_add.carry_in.eq(rounder.overflow)

        # ---- Assembly ----
        result_sign = Signal()
        m.d.comb += result_sign.eq(bigger_sign ^ sub_fix)

        with m.If(is_zero):
            m.d.comb += self.result.eq(0)
        with m.Else():
            m.d.comb += self.result.eq(
                float32.pack(result_sign, exp_add.sum, normalized[1 : MANTISSA_WIDTH + 1])
            )

        return m
