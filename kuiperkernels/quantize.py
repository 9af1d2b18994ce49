"""Float to signed 8-bit quantization with symmetric saturation at +/-127."""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np

INT8_LIMIT = 127
_INT32_MIN = -(2**31)
_INT32_SPAN = 2.0**31


def float2int8(v: float) -> int:
    """Round ``v`` half away from zero and clamp it to ``[-127, 127]``.

    Raises ``ValueError`` when ``v`` is NaN or infinite, since such a value
    has no integer rounding.
    """
    v = float(v)
    if not math.isfinite(v):
        raise ValueError(f"cannot quantize non-finite value {v!r}")
    rounded = math.trunc(v)
    # v - trunc(v) is exact for binary floats, so the half-way test is exact.
    if abs(v - rounded) >= 0.5:
        rounded += 1 if v > 0 else -1
    return max(-INT8_LIMIT, min(INT8_LIMIT, rounded))


def quantize_lanes(values: Iterable[float]) -> list[int]:
    """Quantize a vector of values the way the packed single-precision path does.

    Each value is taken as a 32-bit float, pushed half a unit away from zero
    in 32-bit arithmetic and truncated. Values whose truncation falls outside
    the 32-bit integer range, and NaN, become the integer minimum, which then
    saturates to -127. Results are clamped to ``[-127, 127]``.
    """
    lanes = np.asarray(list(values), dtype=np.float32)
    if lanes.size == 0:
        return []
    half = np.copysign(np.float32(0.5), lanes).astype(np.float32)
    with np.errstate(over="ignore", invalid="ignore"):
        adjusted = (lanes + half).astype(np.float32).astype(np.float64)
        truncated = np.trunc(adjusted)
        valid = np.isfinite(truncated) & (truncated >= -_INT32_SPAN) & (truncated < _INT32_SPAN)
    as_int32 = np.where(valid, truncated, float(_INT32_MIN))
    clamped = np.clip(as_int32, -INT8_LIMIT, INT8_LIMIT).astype(np.int64)
    return [int(x) for x in clamped]


def pack_int8(values: Iterable[float]) -> bytes:
    """Quantize ``values`` as vector lanes and pack them as two's-complement bytes."""
    return bytes(q & 0xFF for q in quantize_lanes(values))