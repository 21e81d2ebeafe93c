from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out

from float32 import EXP_WIDTH
from parallel_prefix import KoggeStoneSubtractor


class ExponentDifference(wiring.Component):
    """Absolute exponent difference for operand ordering

    diff = |a_exp - b_exp|, swap = (b_exp > a_exp)

    Both a - b and b - a are computed in parallel; the borrow of a - b
    selects the non-negative one and doubles as the swap flag.
    Equal exponents keep the original order.
    """

    a_exp: In(EXP_WIDTH)
    b_exp: In(EXP_WIDTH)
    diff: Out(EXP_WIDTH)
    swap: Out(1)

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        m.submodules.sub_ab = sub_ab = KoggeStoneSubtractor(width=EXP_WIDTH)
        m.submodules.sub_ba = sub_ba = KoggeStoneSubtractor(width=EXP_WIDTH)

        # ---- Parallel Subtractions ----
        m.d.comb += sub_ab.a.eq(self.a_exp)
        m.d.comb += sub_ab.b.eq(self.b_exp)
        m.d.comb += sub_ba.a.eq(self.b_exp)
        m.d.comb += sub_ba.b.eq(self.a_exp)

        # ---- Select Non-negative Result ----
        m.d.comb += self.swap.eq(sub_ab.borrow)

        with m.If(sub_ab.borrow):
            m.d.comb += self.diff.eq(sub_ba.diff)
        with m.Else():
            m.d.comb += self.diff.eq(sub_ab.diff)

        return m
