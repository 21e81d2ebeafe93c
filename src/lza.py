from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out


class LeadingZeroAnticipator(wiring.Component):
    """Leading-zero anticipation for a - b, assuming a > b

    Indicator: f[i] = (a ^ b)[i+1] & (a | ~b)[i]

    Above the first differing bit (a=1, b=0) the difference is all zeros,
    and every following (a=0, b=1) pair pushes the leading one down by one.
    The first set f therefore sits at or one below the leading one of
    a - b, so lz_count is exact or one short. No set bit predicts a
    leading one at bit 0.

    Evaluated on the operands alone, in parallel with the subtraction.
    """

    def __init__(self, width: int = 25):
        self.width = width
        self.count_bits = (width - 1).bit_length()

        super().__init__(
            {
                "a": In(width),
                "b": In(width),
                "indicator": Out(width - 1),
                "lz_count": Out(self.count_bits),
            }
        )

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        differ = Signal(self.width)
        keeps_one = Signal(self.width)

        m.d.comb += differ.eq(self.a ^ self.b)
        m.d.comb += keeps_one.eq(self.a | ~self.b)

        m.d.comb += self.indicator.eq(differ[1:] & keeps_one[0 : self.width - 1])

        # ---- Priority Encoder ----
        lz_count_result = self.width - 1

        for i in range(self.width - 1):
            lz_count_result = Mux(
                self.indicator[i],
                self.width - 2 - i,
                lz_count_result,
            )

        m.d.comb += self.lz_count.eq(lz_count_result)

        return m
