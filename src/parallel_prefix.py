from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out


class KoggeStone(wiring.Component):
    """Kogge-Stone parallel prefix network for carry computation

    Computes all carries in O(log n) delay vs O(n) ripple-carry
    For 25-bit close path: log2(25) = 5 levels ~= 10Δ vs 25Δ ripple
    """

    def __init__(self, width: int = 25):
        self.width = width

        super().__init__(
            {
                "generate": In(width),
                "propagate": In(width),
                "carry_in": In(1),
                "carries": Out(width + 1),
            }
        )

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        levels = (self.width - 1).bit_length()

        g = [self.generate[i] for i in range(self.width)]
        p = [self.propagate[i] for i in range(self.width)]

        for lvl in range(levels):
            span = 1 << lvl
            next_g = []
            next_p = []
            for i in range(self.width):
                if i < span:
                    next_g.append(g[i])
                    next_p.append(p[i])
                    continue
                g_node = Signal(name=f"g_{lvl + 1}_{i}")
                p_node = Signal(name=f"p_{lvl + 1}_{i}")
                m.d.comb += g_node.eq(g[i] | (p[i] & g[i - span]))
                m.d.comb += p_node.eq(p[i] & p[i - span])
                next_g.append(g_node)
                next_p.append(p_node)
            g, p = next_g, next_p

        m.d.comb += self.carries[0].eq(self.carry_in)

        for i in range(self.width):
            m.d.comb += self.carries[i + 1].eq(g[i] | (p[i] & self.carry_in))

        return m


class KoggeStoneAdder(wiring.Component):
    """Kogge-Stone Adder: O(log n) delay for fast addition"""

    def __init__(self, width: int = 8):
        self.width = width

        super().__init__(
            {
                "a": In(width),
                "b": In(width),
                "carry_in": In(1),
                "sum": Out(width),
                "carry_out": Out(1),
            }
        )

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        m.submodules.prefix = prefix = KoggeStone(width=self.width)

        propagate = Signal(self.width)

        m.d.comb += prefix.generate.eq(self.a & self.b)
        m.d.comb += propagate.eq(self.a ^ self.b)
        m.d.comb += prefix.propagate.eq(propagate)
        m.d.comb += prefix.carry_in.eq(self.carry_in)

        m.d.comb += self.sum.eq(propagate ^ prefix.carries[0 : self.width])
        m.d.comb += self.carry_out.eq(prefix.carries[self.width])

        return m


class KoggeStoneAddSub(wiring.Component):
    """a + b, or a - b via two's complement when `subtract` is set

    On subtraction carry_out is 1 exactly when a >= b.
    """

    def __init__(self, width: int = 25):
        self.width = width

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

        m.submodules.adder = adder = KoggeStoneAdder(self.width)

        m.d.comb += adder.a.eq(self.a)
        m.d.comb += adder.b.eq(Mux(self.subtract, ~self.b, self.b))
        m.d.comb += adder.carry_in.eq(self.subtract)

        m.d.comb += self.sum.eq(adder.sum)
        m.d.comb += self.carry_out.eq(adder.carry_out)

        return m


class KoggeStoneSubtractor(wiring.Component):
    """Kogge-Stone Subtractor: a - b via two's complement"""

    def __init__(self, width: int = 8):
        self.width = width

        super().__init__(
            {
                "a": In(width),
                "b": In(width),
                "diff": Out(width),
                "borrow": Out(1),
            }
        )

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        m.submodules.addsub = addsub = KoggeStoneAddSub(self.width)

        m.d.comb += addsub.a.eq(self.a)
        m.d.comb += addsub.b.eq(self.b)
        m.d.comb += addsub.subtract.eq(1)

        m.d.comb += self.diff.eq(addsub.sum)
        m.d.comb += self.borrow.eq(~addsub.carry_out)

        return m
