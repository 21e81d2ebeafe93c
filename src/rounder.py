from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out


class Rounder(wiring.Component):
    """Round-to-nearest-even on a significand and its G/R/S bits

    round_up = G & (R | S | lsb); ties go to the even neighbour.
    overflow is the carry out of the increment (all-ones significand).
    """

    def __init__(self, width: int = 24):
        self.width = width

        super().__init__(
            {
                "mantissa_in": In(width),
                "guard": In(1),
                "round_bit": In(1),
                "sticky": In(1),
                "round_up": Out(1),
                "mantissa_out": Out(width),
                "overflow": Out(1),
            }
        )

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        lsb = self.mantissa_in[0]

        m.d.comb += self.round_up.eq(self.guard & (self.round_bit | self.sticky | lsb))

        incremented = Signal(self.width + 1)
        m.d.comb += incremented.eq(self.mantissa_in + self.round_up)

        m.d.comb += self.mantissa_out.eq(incremented[0 : self.width])
        m.d.comb += self.overflow.eq(incremented[self.width])

        return m
