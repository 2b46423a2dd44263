import math

import pytest

from aieharness.kernels import (
    DeviationKernel,
    MeanKernel,
    NormKernel,
    aie_adder,
    to_bfloat16,
)


def test_to_bfloat16_keeps_exact_values():
    for value in (0.0, 1.0, -2.5, 256.0, 0.5):
        assert to_bfloat16(value) == value


def test_to_bfloat16_rounds_one_third():
    assert to_bfloat16(1 / 3) == 0.333984375


def test_to_bfloat16_is_idempotent():
    for value in (0.1, 3.14159, -123.456, 1e-5, 65537.0):
        once = to_bfloat16(value)
        assert to_bfloat16(once) == once


def test_to_bfloat16_huge_value_is_infinite():
    assert to_bfloat16(1e300) == math.inf
    assert to_bfloat16(-1e300) == -math.inf


def test_adder_adds_elementwise():
    a = [i % 100 - 50 for i in range(4096)]
    b = [(i * 7) % 100 - 50 for i in range(4096)]
    result = aie_adder(a, b)
    assert len(result) == 4096
    assert all(r == x + y for r, x, y in zip(result, a, b))


def test_adder_wraps_int32():
    a = [2**31 - 1] * 4096
    b = [1] * 4096
    assert aie_adder(a, b)[0] == -(2**31)


def test_adder_rejects_wrong_length():
    with pytest.raises(ValueError):
        aie_adder([1] * 10, [1] * 10)


def test_kernel_rejects_cols_not_multiple_of_lanes():
    with pytest.raises(ValueError):
        MeanKernel(30, 2, 1)


def test_kernel_rejects_wrong_block_size():
    kernel = MeanKernel(32, 2, 1)
    with pytest.raises(ValueError):
        kernel.process([1.0] * 10)


def test_mean_of_constant_blocks():
    kernel = MeanKernel(32, 2, 3)
    assert kernel.process([2.0] * 64) is None
    assert kernel.process([2.0] * 64) is None
    assert kernel.process([2.0] * 64) == 2.0
    assert kernel.iteration == 0


def test_mean_resets_between_runs():
    kernel = MeanKernel(32, 1, 1)
    first = kernel.process([4.0] * 32)
    second = kernel.process([-6.0] * 32)
    assert first == 4.0
    assert second == -6.0


def test_mean_of_symmetric_block_is_zero():
    kernel = MeanKernel(32, 2, 1)
    block = [3.0 if i % 2 else -3.0 for i in range(64)]
    assert kernel.process(block) == 0.0


def test_deviation_of_constant_block_is_zero():
    kernel = DeviationKernel(32, 2, 1)
    mean, dev = kernel.process([5.0] * 64, 5.0)
    assert mean == 5.0
    assert dev == 0.0


def test_deviation_of_symmetric_block():
    kernel = DeviationKernel(32, 2, 2)
    block = [3.0 if i % 2 else -3.0 for i in range(64)]
    assert kernel.process(block, 0.0) is None
    # the mean is only read on the first block
    assert kernel.process(block) == (0.0, 3.0)


def test_deviation_requires_mean_on_first_block():
    kernel = DeviationKernel(32, 1, 1)
    with pytest.raises(ValueError):
        kernel.process([1.0] * 32)


def test_norm_with_unit_deviation_passes_values_through():
    kernel = NormKernel(32, 1, 1)
    block = [0.1 * i for i in range(32)]
    out = kernel.process(block, (0.0, 1.0))
    assert out == [to_bfloat16(v) for v in block]


def test_norm_clamps_small_deviation():
    kernel = NormKernel(32, 1, 1)
    tiny = to_bfloat16(0.00001)
    out = kernel.process([tiny] * 32, (0.0, 0.0))
    assert kernel.deviation == tiny
    assert out == [1.0] * 32


def test_norm_reads_parameters_once_per_run():
    kernel = NormKernel(32, 1, 2)
    kernel.process([4.0] * 32, (4.0, 2.0))
    second = kernel.process([4.0] * 32)
    assert second == [0.0] * 32
    assert kernel.iteration == 0
    with pytest.raises(ValueError):
        kernel.process([4.0] * 32)


def test_pipeline_normalised_output_has_zero_mean():
    block = [float(i % 8) for i in range(64)]
    mean = MeanKernel(32, 2, 1).process(block)
    mean_dev = DeviationKernel(32, 2, 1).process(block, mean)
    out = NormKernel(32, 2, 1).process(block, mean_dev)
    assert abs(sum(out) / len(out)) < 0.05