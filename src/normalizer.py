from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out


class Normalizer(wiring.Component):
    """Barrel shifter for close-path normalization (left-shift)

    - Delay: 2*log2(width) gate delays (2-delta per mux stage)
    - For the close path: 25-bit width, shift up to 24, 10-delta delay
    - `top` is the bit the leading one should land on; 0 means the
      shift amount was one short
    """

    def __init__(self, width: int = 25):
        self.width = width
        self.shift_bits = (width - 1).bit_length()

        super().__init__(
            {
                "value_in": In(width),
                "shift_amount": In(self.shift_bits),
                "value_out": Out(width),
                "top": Out(1),
            }
        )

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        # ---- Left Shift ----
        m.d.comb += self.value_out.eq(self.value_in << self.shift_amount)
        m.d.comb += self.top.eq(self.value_out[self.width - 1])

        return m
