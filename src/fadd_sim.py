from amaranth.sim import Simulator

from close_path import FAddClosePath
from fadd import FAdd
from far_path import FAddFarPath


def run(dut, vectors, vcd_file: str | None = None) -> list[int]:
    """Drive each port mapping in `vectors` into `dut` and collect `result`

    All vectors share one simulator run; the design is purely combinational,
    so every result depends only on its own inputs.
    """
    results = []

    async def bench(ctx):
        for ports in vectors:
            for name, value in ports.items():
                ctx.set(getattr(dut, name), value)
            results.append(ctx.get(dut.result))

    sim = Simulator(dut)
    sim.add_testbench(bench)

    if vcd_file:
        with sim.write_vcd(vcd_file):
            sim.run()
    else:
        sim.run()

    return results


def add(a: int, b: int, subtract: bool = False) -> int:
    return run(FAdd(), [{"a": a, "b": b, "op": int(subtract)}])[0]


def add_far(bigger: int, smaller: int, subtract: bool, exp_diff: int) -> int:
    """Far path only: exponent(bigger) >= exponent(smaller), exp_diff >= 2"""
    vector = {"bigger": bigger, "smaller": smaller, "op": int(subtract), "exp_diff": exp_diff}
    return run(FAddFarPath(), [vector])[0]


def add_close(bigger: int, smaller: int, subtract: bool, exp_diff: int) -> int:
    """Close path only: exponent(bigger) >= exponent(smaller), exp_diff in {0, 1}"""
    vector = {"bigger": bigger, "smaller": smaller, "op": int(subtract), "exp_diff": exp_diff}
    return run(FAddClosePath(), [vector])[0]
