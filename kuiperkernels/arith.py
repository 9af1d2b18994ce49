"""Single-precision lane arithmetic: reductions, multiply-add and horizontal sums."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

_HSUM_LANES = 8
_FMADD_GROUP = 4


def _lanes(values: Iterable[float], dtype=np.float32) -> np.ndarray:
    arr = np.asarray(list(values) if not isinstance(values, np.ndarray) else values, dtype=dtype)
    if arr.ndim != 1:
        raise ValueError("lane vector must be one-dimensional")
    return arr


def _check_power_of_two(arr: np.ndarray) -> None:
    n = arr.size
    if n == 0 or n & (n - 1):
        raise ValueError(f"lane count must be a positive power of two, got {n}")


def _fold(arr: np.ndarray, combine) -> np.ndarray:
    """Repeatedly combine the lower half of the lanes with the upper half."""
    while arr.size > 1:
        half = arr.size // 2
        arr = combine(arr[:half], arr[half:])
    return arr


def _max_lanes(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    # Packed max yields the second operand when the comparison is unordered.
    return np.where(a > b, a, b).astype(np.float32)


def reduce_add(values: Iterable[float]) -> float:
    """Sum a vector of 32-bit float lanes by halving, as the packed reduction does."""
    arr = _lanes(values)
    _check_power_of_two(arr)
    with np.errstate(over="ignore", invalid="ignore"):
        result = _fold(arr, lambda a, b: (a + b).astype(np.float32))
    return float(result[0])


def reduce_max(values: Iterable[float]) -> float:
    """Largest of a vector of 32-bit float lanes, folded by halves."""
    arr = _lanes(values)
    _check_power_of_two(arr)
    return float(_fold(arr, _max_lanes)[0])


def reduce_add_int32(values: Iterable[int]) -> int:
    """Sum 32-bit integer lanes with two's-complement wrap-around."""
    raw = [int(v) for v in values]
    for v in raw:
        if not -(2**31) <= v < 2**31:
            raise ValueError(f"value {v} does not fit a 32-bit lane")
    arr = np.asarray(raw, dtype=np.int32)
    _check_power_of_two(arr)
    with np.errstate(over="ignore"):
        result = _fold(arr, lambda a, b: (a + b).astype(np.int32))
    return int(result[0])


def _same_shape(*arrays: np.ndarray) -> None:
    sizes = {a.size for a in arrays}
    if len(sizes) != 1:
        raise ValueError("lane vectors must have the same length")


def fmadd(a: Iterable[float], b: Iterable[float], c: Iterable[float]) -> np.ndarray:
    """Lane-wise ``a * b + c`` in 32-bit floats."""
    va, vb, vc = _lanes(a), _lanes(b), _lanes(c)
    _same_shape(va, vb, vc)
    with np.errstate(over="ignore", invalid="ignore"):
        return ((va * vb).astype(np.float32) + vc).astype(np.float32)


def fnmadd(a: Iterable[float], b: Iterable[float], c: Iterable[float]) -> np.ndarray:
    """Lane-wise ``c - a * b`` in 32-bit floats."""
    va, vb, vc = _lanes(a), _lanes(b), _lanes(c)
    _same_shape(va, vb, vc)
    with np.errstate(over="ignore", invalid="ignore"):
        return (vc - (va * vb).astype(np.float32)).astype(np.float32)


def fmadd_scalar(a: Iterable[float], b: Iterable[float], c: float) -> np.ndarray:
    """Lane-wise ``a + b * c`` with ``c`` broadcast to every lane."""
    vb = _lanes(b)
    return fmadd(vb, np.full(vb.size, c, dtype=np.float32), a)


def fmrsub_scalar(a: Iterable[float], b: Iterable[float], c: float) -> np.ndarray:
    """Lane-wise ``a - b * c`` with ``c`` broadcast to every lane."""
    vb = _lanes(b)
    return fnmadd(vb, np.full(vb.size, c, dtype=np.float32), a)


def fmadd_lanes(
    total: Iterable[float],
    weights: Sequence[Iterable[float]],
    values: Sequence[Iterable[float]],
) -> np.ndarray:
    """Accumulate ``sum(w_i * v_i)`` into ``total``, four products at a time.

    Each group of four products is added as ``(p0 + p1) + (p2 + p3)`` before
    being added to the running total. The number of weight and value vectors
    must be equal and a positive multiple of four.
    """
    acc = _lanes(total)
    ws = [_lanes(w) for w in weights]
    vs = [_lanes(v) for v in values]
    if len(ws) != len(vs):
        raise ValueError("weights and values must have the same count")
    if not ws or len(ws) % _FMADD_GROUP:
        raise ValueError(f"need a positive multiple of {_FMADD_GROUP} vectors, got {len(ws)}")
    _same_shape(acc, *ws, *vs)
    with np.errstate(over="ignore", invalid="ignore"):
        for start in range(0, len(ws), _FMADD_GROUP):
            p0, p1, p2, p3 = (
                (w * v).astype(np.float32)
                for w, v in zip(ws[start : start + _FMADD_GROUP], vs[start : start + _FMADD_GROUP])
            )
            group = ((p0 + p1).astype(np.float32) + (p2 + p3).astype(np.float32)).astype(np.float32)
            acc = (acc + group).astype(np.float32)
    return acc


def _eight_lane_sum(vec: np.ndarray) -> np.float32:
    f = np.float32
    low = f(f(vec[0] + vec[1]) + f(vec[2] + vec[3]))
    high = f(f(vec[4] + vec[5]) + f(vec[6] + vec[7]))
    return f(low + high)


def horizontal_sums(*args: Iterable[float]) -> np.ndarray:
    """Sum each of 3, 4 or 8 eight-lane vectors into one lane of the result.

    Eight vectors give eight sums; four give four; three give four sums with
    the last lane zero.
    """
    if len(args) not in (3, 4, 8):
        raise ValueError(f"expected 3, 4 or 8 vectors, got {len(args)}")
    vectors = [_lanes(v) for v in args]
    for vec in vectors:
        if vec.size != _HSUM_LANES:
            raise ValueError(f"each vector must have {_HSUM_LANES} lanes, got {vec.size}")
    if len(vectors) == 3:
        vectors.append(np.zeros(_HSUM_LANES, dtype=np.float32))
    with np.errstate(over="ignore", invalid="ignore"):
        return np.array([_eight_lane_sum(v) for v in vectors], dtype=np.float32)