import os
import random

import fadd_sim
from close_path import FAddClosePath
from fadd import FAdd
from far_path import FAddFarPath
from float32 import F32


def test_add_entry_point(reference):
    two = F32.from_float(2.0).to_bits()
    half = F32.from_float(0.5).to_bits()

    assert fadd_sim.add(two, half) == 0x40200000
    assert fadd_sim.add(two, half, subtract=True) == F32.from_float(1.5).to_bits()
    assert fadd_sim.add(half, two, subtract=True) == reference(half, two, True)


def test_path_entry_points():
    assert fadd_sim.add_far(F32.from_float(16.0).to_bits(), F32.from_float(0.125).to_bits(), False, 7) == (
        F32.from_float(16.125).to_bits()
    )
    assert fadd_sim.add_close(F32.from_float(6.0).to_bits(), F32.from_float(3.0).to_bits(), True, 1) == (
        F32.from_float(3.0).to_bits()
    )


def test_run_batch(reference):
    rng = random.Random(42)
    vectors = []
    for _ in range(200):
        exp = rng.randint(60, 190)
        a = F32.pack(rng.randint(0, 1), exp, rng.getrandbits(23)).to_bits()
        b = F32.pack(rng.randint(0, 1), exp - rng.randint(0, 30), rng.getrandbits(23)).to_bits()
        vectors.append({"a": a, "b": b, "op": rng.randint(0, 1)})

    results = fadd_sim.run(FAdd(), vectors)

    assert len(results) == len(vectors)
    for ports, result in zip(vectors, results):
        assert result == reference(ports["a"], ports["b"], ports["op"])


def test_run_writes_vcd(tmp_path):
    vcd_file = str(tmp_path / "far_path.vcd")
    vectors = [{"bigger": 0x40000000, "smaller": 0x3F000000, "op": 0, "exp_diff": 2}]

    assert fadd_sim.run(FAddFarPath(), vectors, vcd_file=vcd_file) == [0x40200000]
    assert os.path.getsize(vcd_file) > 0


def test_seam_far_matches_close():
    """Difference-1 pairs with at most one cancelled bit agree on both paths"""
    rng = random.Random(46)
    vectors = []
    for _ in range(300):
        exp = rng.randint(60, 190)
        bigger_mant = rng.getrandbits(23)
        smaller_mant = rng.randint(0, bigger_mant)
        bigger = F32.pack(rng.randint(0, 1), exp, bigger_mant).to_bits()
        smaller = F32.pack(rng.randint(0, 1), exp - 1, smaller_mant).to_bits()
        vectors.append({"bigger": bigger, "smaller": smaller, "op": rng.randint(0, 1), "exp_diff": 1})

    far_results = fadd_sim.run(FAddFarPath(), vectors)
    close_results = fadd_sim.run(FAddClosePath(), vectors)

    for ports, far, close in zip(vectors, far_results, close_results):
        assert far == close, (
            f"0x{ports['bigger']:08X} {'-' if ports['op'] else '+'} 0x{ports['smaller']:08X}: "
            f"far 0x{far:08X}, close 0x{close:08X}"
        )


def test_seam_add_matches_far():
    """True difference 2: the dispatcher's result equals the far path's"""
    rng = random.Random(47)
    for _ in range(50):
        exp = rng.randint(60, 190)
        bigger = F32.pack(rng.randint(0, 1), exp, rng.getrandbits(23)).to_bits()
        smaller = F32.pack(rng.randint(0, 1), exp - 2, rng.getrandbits(23)).to_bits()
        subtract = bool(rng.randint(0, 1))

        assert fadd_sim.add(bigger, smaller, subtract) == fadd_sim.add_far(bigger, smaller, subtract, 2)
