from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out


class CarrySelectAdder(wiring.Component):
    """Carry-select adder: every block after the first precomputes both
    carry-in cases and the incoming carry picks one."""

    def __init__(self, width: int = 27, block_size: int = 6):
        self.width = width
        self.block_size = block_size

        super().__init__(
            {
                "a": In(width),
                "b": In(width),
                "carry_in": In(1),
                "sum": Out(width),
                "carry_out": Out(1),
            }
        )

    def blocks(self) -> list[tuple[int, int]]:
        return [(start, min(start + self.block_size, self.width)) for start in range(0, self.width, self.block_size)]

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        carry = self.carry_in

        for i, (start, end) in enumerate(self.blocks()):
            block_width = end - start
            a_block = self.a[start:end]
            b_block = self.b[start:end]

            if i == 0:
                block_sum = Signal(block_width + 1, name=f"block_sum_{i}")
                m.d.comb += block_sum.eq(a_block + b_block + carry)
            else:
                sum_with_0 = Signal(block_width + 1, name=f"sum_with_0_{i}")
                sum_with_1 = Signal(block_width + 1, name=f"sum_with_1_{i}")
                m.d.comb += sum_with_0.eq(a_block + b_block)
                m.d.comb += sum_with_1.eq(a_block + b_block + 1)

                block_sum = Signal(block_width + 1, name=f"block_sum_{i}")
                m.d.comb += block_sum.eq(Mux(carry, sum_with_1, sum_with_0))

            m.d.comb += self.sum[start:end].eq(block_sum[0:block_width])
            carry = block_sum[block_width]

        m.d.comb += self.carry_out.eq(carry)

        return m


class CarrySelectAddSub(wiring.Component):
    """Far-path mantissa unit: a + b, or a + ~b + 1 when `subtract` is set"""

    def __init__(self, width: int = 27, block_size: int = 6):
        self.width = width
        self.block_size = block_size

        super().__init__(
            {
                "a": In(width),
                "b": In(width),
                "subtract": In(1),
                "sum": Out(width),
                "carry_out": Out(1),
            }
        )

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        m.submodules.adder = adder = CarrySelectAdder(self.width, self.block_size)

        m.d.comb += adder.a.eq(self.a)
        m.d.comb += adder.b.eq(Mux(self.subtract, ~self.b, self.b))
        m.d.comb += adder.carry_in.eq(self.subtract)

        m.d.comb += self.sum.eq(adder.sum)
        m.d.comb += self.carry_out.eq(adder.carry_out)

        return m
