import math

import numpy as np
import pytest

from kuiperkernels.arith import (
    fmadd,
    fmadd_lanes,
    fmadd_scalar,
    fmrsub_scalar,
    fnmadd,
    horizontal_sums,
    reduce_add,
    reduce_add_int32,
    reduce_max,
)


@pytest.mark.parametrize("n", [1, 2, 4, 8, 16])
def test_reduce_add_matches_integer_sum(n):
    values = list(range(1, n + 1))
    assert reduce_add(values) == sum(values)


@pytest.mark.parametrize("values", [[], [1.0, 2.0, 3.0], [0.0] * 6])
def test_reduce_add_rejects_bad_lane_counts(values):
    with pytest.raises(ValueError):
        reduce_add(values)


@pytest.mark.parametrize("values", [[3.0, -1.0, 7.5, 2.0], [-5, -2, -9, -1, -8, -3, -4, -6]])
def test_reduce_max_matches_builtin(values):
    assert reduce_max(values) == max(values)


def test_reduce_max_rejects_odd_count():
    with pytest.raises(ValueError):
        reduce_max([1.0, 2.0, 3.0])


def test_reduce_add_int32_plain_sum():
    values = [10, -3, 7, 100]
    assert reduce_add_int32(values) == sum(values)


def test_reduce_add_int32_wraps():
    assert reduce_add_int32([2**31 - 1, 1, 0, 0]) == -(2**31)


def test_reduce_add_int32_rejects_out_of_range():
    with pytest.raises(ValueError):
        reduce_add_int32([2**31, 0, 0, 0])


def test_fmadd_fnmadd_round_trip():
    a = [1.0, 2.0, -3.0, 4.0]
    b = [5.0, -6.0, 7.0, 8.0]
    c = [0.5, 1.5, -2.5, 3.5]
    assert np.array_equal(fnmadd(a, b, fmadd(a, b, c)), np.asarray(c, dtype=np.float32))


def test_fmadd_with_zero_addend_is_product():
    a = [2.0, 3.0, -4.0]
    b = [5.0, 6.0, 7.0]
    result = fmadd(a, b, [0.0, 0.0, 0.0])
    assert list(result) == [x * y for x, y in zip(a, b)]


def test_fmadd_length_mismatch():
    with pytest.raises(ValueError):
        fmadd([1.0, 2.0], [1.0], [1.0, 2.0])


def test_scalar_forms_match_vector_forms():
    a = [1.0, -2.0, 3.0, 4.0]
    b = [0.5, 0.25, -1.0, 2.0]
    c = 3.0
    assert np.array_equal(fmadd_scalar(a, b, c), fmadd(b, [c] * 4, a))
    assert np.array_equal(fmrsub_scalar(a, b, c), fnmadd(b, [c] * 4, a))


def test_fmadd_scalar_then_fmrsub_scalar_restores():
    a = [1.0, 2.0, 3.0, 4.0]
    b = [4.0, 3.0, 2.0, 1.0]
    assert np.array_equal(fmrsub_scalar(fmadd_scalar(a, b, 2.0), b, 2.0), np.asarray(a, dtype=np.float32))


def test_fmadd_lanes_four_and_eight_agree_with_fmadd_chain():
    total = [1.0] * 8
    weights = [[float(i + 1)] * 8 for i in range(8)]
    values = [[float(j) for j in range(8)] for _ in range(8)]
    result = fmadd_lanes(total, weights, values)
    expected = np.asarray(total, dtype=np.float32)
    for w, v in zip(weights, values):
        expected = fmadd(w, v, expected)
    assert np.array_equal(result, expected)


def test_fmadd_lanes_zero_weights_keep_total():
    total = [1.5, -2.5, 3.5, 0.0]
    zeros = [[0.0] * 4] * 4
    ones = [[1.0] * 4] * 4
    assert np.array_equal(fmadd_lanes(total, zeros, ones), np.asarray(total, dtype=np.float32))


@pytest.mark.parametrize("count", [0, 3, 5])
def test_fmadd_lanes_rejects_bad_counts(count):
    with pytest.raises(ValueError):
        fmadd_lanes([0.0] * 4, [[1.0] * 4] * count, [[1.0] * 4] * count)


def test_fmadd_lanes_count_mismatch():
    with pytest.raises(ValueError):
        fmadd_lanes([0.0] * 4, [[1.0] * 4] * 4, [[1.0] * 4] * 8)


def test_horizontal_sums_eight_vectors():
    vectors = [[float(i * 8 + j) for j in range(8)] for i in range(8)]
    result = horizontal_sums(*vectors)
    assert list(result) == [sum(v) for v in vectors]


def test_horizontal_sums_four_vectors_match_reduce_add():
    vectors = [[float((i + 1) * (j - 3)) for j in range(8)] for i in range(4)]
    result = horizontal_sums(*vectors)
    assert list(result) == [reduce_add(v) for v in vectors]


def test_horizontal_sums_three_vectors_pads_zero():
    vectors = [[1.0] * 8, [2.0] * 8, [3.0] * 8]
    result = horizontal_sums(*vectors)
    assert len(result) == 4
    assert result[3] == 0.0
    assert list(result[:3]) == [sum(v) for v in vectors]


def test_horizontal_sums_bad_vector_count():
    with pytest.raises(ValueError):
        horizontal_sums(*([[1.0] * 8] * 5))


def test_horizontal_sums_bad_lane_count():
    with pytest.raises(ValueError):
        horizontal_sums([1.0] * 4, [1.0] * 4, [1.0] * 4, [1.0] * 4)


def test_reduce_add_is_float32():
    values = [16777216.0, 1.0, 0.0, 0.0]
    # 2**24 + 1 is not representable in single precision.
    assert reduce_add(values) == 16777216.0
    assert not math.isclose(reduce_add(values), sum(values), abs_tol=0.5)