from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out


class Aligner(wiring.Component):
    """Right-shift alignment with guard/round/sticky extraction

    The significand is placed above `extension` zero bits and shifted right,
    so every bit that leaves the significand window is still visible for
    G/R/S. Shifts of `extension` or more skip the wide OR-reduction:
    the whole significand lies below the round bit, so sticky is its OR.
    """

    def __init__(self, width: int = 24, extension: int = 32):
        self.width = width
        self.extension = extension

        super().__init__(
            {
                "value_in": In(width),
                "shift_amount": In(8),
                "value_out": Out(width),
                "guard": Out(1),
                "round_bit": Out(1),
                "sticky": Out(1),
            }
        )

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        ext = self.extension

        extended = Signal(self.width + ext)
        shifted = Signal(self.width + ext)

        m.d.comb += extended.eq(Cat(Const(0, ext), self.value_in))
        m.d.comb += shifted.eq(extended >> self.shift_amount)

        m.d.comb += self.value_out.eq(shifted[ext:])
        m.d.comb += self.guard.eq(shifted[ext - 1])
        m.d.comb += self.round_bit.eq(shifted[ext - 2])

        large_shift = Signal()
        m.d.comb += large_shift.eq(self.shift_amount >= ext)

        with m.If(large_shift):
            m.d.comb += self.sticky.eq(self.value_in.any())
        with m.Else():
            m.d.comb += self.sticky.eq(shifted[0 : ext - 2].any())

        return m
