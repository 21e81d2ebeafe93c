import argparse

import numpy as np
import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--vcd",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="whether to produce vcd files",
    )


@pytest.fixture
def vcd_file(request):
    """VCD path named after the running test, or None without --vcd"""
    if request.config.getoption("--vcd"):
        return f"{request.node.name}.vcd"
    return None


def f32_reference(a: int, b: int, subtract: bool = False) -> int:
    """Native binary32 round-to-nearest-even a + b (or a - b) on raw words"""
    x = np.array([a], dtype=np.uint32).view(np.float32)
    y = np.array([b], dtype=np.uint32).view(np.float32)
    with np.errstate(over="ignore", under="ignore"):
        r = x - y if subtract else x + y
    return int(r.view(np.uint32)[0])


@pytest.fixture
def reference():
    return f32_reference
