"""Matrix transposes over groups of vector registers.

A group of ``n`` registers of ``lane_width`` lanes holds an ``n x lane_width``
matrix, one row per register. The packed transpose writes the transposed
``lane_width x n`` matrix back, row after row, into ``n`` registers of
``lane_width`` lanes. This is the layout used for the 8-lane and 16-lane
float transposes (8x2 up to 16x16) and for the 16-bit integer ones.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np


def _as_matrix(rows: Sequence[Iterable] | np.ndarray) -> np.ndarray:
    if isinstance(rows, np.ndarray):
        matrix = rows
    else:
        materialized = [list(row) for row in rows]
        if not materialized:
            raise ValueError("at least one row is required")
        widths = {len(row) for row in materialized}
        if len(widths) != 1:
            raise ValueError(f"rows have differing lengths: {sorted(widths)}")
        matrix = np.asarray(materialized)
    if matrix.ndim != 2:
        raise ValueError(f"expected a two-dimensional group of rows, got {matrix.ndim} dimensions")
    if matrix.shape[0] == 0 or matrix.shape[1] == 0:
        raise ValueError("rows must be non-empty")
    return matrix


def transpose(rows: Sequence[Iterable] | np.ndarray) -> np.ndarray:
    """Return the plain transpose of a rectangular group of rows."""
    return _as_matrix(rows).T.copy()


def transpose_packed(rows: Sequence[Iterable] | np.ndarray, lane_width: int) -> np.ndarray:
    """Transpose ``len(rows)`` registers of ``lane_width`` lanes, repacking the result.

    The returned array has the same shape as the input: the transposed matrix
    laid out row-major across the same number of registers. Element types are
    kept, so 16-bit integer lanes stay 16-bit.
    """
    if lane_width <= 0:
        raise ValueError(f"lane width must be positive, got {lane_width}")
    matrix = _as_matrix(rows)
    count, width = matrix.shape
    if width != lane_width:
        raise ValueError(f"each register must have {lane_width} lanes, got {width}")
    return matrix.T.reshape(count, lane_width).copy()