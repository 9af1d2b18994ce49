"""3x3, stride-1 convolution by the Winograd F(4x4, 3x3) algorithm.

Tensors are numpy arrays laid out as ``(channels, rows, cols)``. Every
kernel is an array of shape ``(input_channels, 3, 3)``. Arithmetic is done
in 32-bit floats, following the same order of operations throughout.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

TILE_IN = 6
TILE_OUT = 4
KERNEL = 3

_F = np.float32


def _g_transform(x: np.ndarray) -> np.ndarray:
    """Expand three taps on the last axis into six transformed taps."""
    g0, g1, g2 = x[..., 0], x[..., 1], x[..., 2]
    two, three, four, eight = _F(2), _F(3), _F(4), _F(8)
    return np.stack(
        [
            g0 / four,
            ((-g0 - g1 - g2) / two) / three,
            ((-g0 + g1 - g2) / two) / three,
            (g0 / eight + g1 / four + g2 / two) / three,
            (g0 / eight - g1 / four + g2 / two) / three,
            g2,
        ],
        axis=-1,
    ).astype(np.float32)


def _bt_first(x: np.ndarray) -> np.ndarray:
    """Input transform applied along the last axis (first pass)."""
    d0, d1, d2, d3, d4, d5 = (x[..., k] for k in range(TILE_IN))
    two, four, five = _F(2), _F(4), _F(5)
    return np.stack(
        [
            (d0 * four) - d2 * five + d4,
            -(d1 * four) - d2 * four + d3 + d4,
            (d1 * four) - d2 * four - d3 + d4,
            -(d1 * two) - d2 + d3 * two + d4,
            (d1 * two) - d2 - d3 * two + d4,
            (d1 * four) - d3 * five + d5,
        ],
        axis=-1,
    ).astype(np.float32)


def _bt_second(x: np.ndarray) -> np.ndarray:
    """Input transform applied along the last axis (second pass)."""
    b0, b1, b2, b3, b4, b5 = (x[..., k] for k in range(TILE_IN))
    two, four = _F(2), _F(4)
    return np.stack(
        [
            (b0 * four) - (b2 * four) - b2 + b4,
            -(b1 * four) - (b2 * four) + b3 + b4,
            (b1 * four) - (b2 * four) - b3 + b4,
            -(b1 * two) - b2 + b3 * two + b4,
            (b1 * two) - b2 - b3 * two + b4,
            (b1 * four) - (b3 * four) - b3 + b5,
        ],
        axis=-1,
    ).astype(np.float32)


def _at(x: np.ndarray) -> np.ndarray:
    """Output transform: six values on the last axis down to four."""
    m0, m1, m2, m3, m4, m5 = (x[..., k] for k in range(TILE_IN))
    two, four, eight = _F(2), _F(4), _F(8)
    return np.stack(
        [
            m0 + m1 + m2 + m3 + m4,
            m1 - m2 + (m3 * two) - (m4 * two),
            m1 + m2 + (m3 * four) + (m4 * four),
            m1 - m2 + (m3 * eight) - (m4 * eight) + m5,
        ],
        axis=-1,
    ).astype(np.float32)


def transform_kernel(g) -> np.ndarray:
    """Transform a 3x3 kernel into the 6x6 Winograd domain."""
    kernel = np.asarray(g, dtype=np.float32)
    if kernel.shape != (KERNEL, KERNEL):
        raise ValueError(f"kernel must be 3x3, got shape {kernel.shape}")
    # Row i of the intermediate holds G applied to kernel row i.
    partial = _g_transform(kernel)
    return _g_transform(partial.T).T.copy()


def _check_transform(transform_g: np.ndarray) -> np.ndarray:
    tg = np.asarray(transform_g, dtype=np.float32)
    if tg.size == 0:
        raise ValueError("transformed kernel is empty")
    if tg.shape != (TILE_IN, TILE_IN):
        raise ValueError(f"transformed kernel must be 6x6, got shape {tg.shape}")
    return tg


def _tiles(transform_g: np.ndarray, patches: np.ndarray) -> np.ndarray:
    """Run the Winograd pipeline on patches of shape (..., 6, 6)."""
    with np.errstate(over="ignore", invalid="ignore"):
        first = _bt_first(patches)
        v = _bt_second(np.swapaxes(first, -1, -2)) * transform_g.T
        atm = _at(np.swapaxes(v, -1, -2))
        y = _at(np.swapaxes(atm, -1, -2))
    return np.swapaxes(y, -1, -2).astype(np.float32)


def winograd_tile(transform_g, tile) -> np.ndarray:
    """Correlate a 6x6 input patch with a transformed kernel, giving a 4x4 patch."""
    tg = _check_transform(transform_g)
    patch = np.asarray(tile, dtype=np.float32)
    if patch.shape != (TILE_IN, TILE_IN):
        raise ValueError(f"input tile must be 6x6, got shape {patch.shape}")
    return _tiles(tg, patch).copy()


def _tile_count(extent: int) -> int:
    return -(-(extent - 2) // TILE_OUT)


def convolution_3x3s1(input, weights: Sequence, output=None) -> np.ndarray:
    """Convolve ``input`` with each 3x3 kernel in ``weights``, stride 1, no padding.

    The result for kernel ``k`` is accumulated into channel ``k`` of
    ``output``. When ``output`` is ``None`` or empty a zero tensor of shape
    ``(len(weights), rows - 2, cols - 2)`` is created. The output is returned.
    """
    data = np.asarray(input, dtype=np.float32)
    if data.size == 0:
        raise ValueError("input for winograd is empty")
    if data.ndim != 3:
        raise ValueError(f"input must have three dimensions, got {data.ndim}")
    channels, rows, cols = data.shape
    if rows < KERNEL or cols < KERNEL:
        raise ValueError(f"input of {rows}x{cols} is smaller than the 3x3 kernel")

    kernels = [np.asarray(w, dtype=np.float32) for w in weights]
    for index, kernel in enumerate(kernels):
        if kernel.shape != (channels, KERNEL, KERNEL):
            raise ValueError(
                f"kernel {index} must have shape {(channels, KERNEL, KERNEL)}, got {kernel.shape}"
            )

    out_h = rows - KERNEL + 1
    out_w = cols - KERNEL + 1
    if output is None or np.asarray(output).size == 0:
        output = np.zeros((len(kernels), out_h, out_w), dtype=np.float32)
    if not isinstance(output, np.ndarray) or output.ndim != 3:
        raise ValueError("output must be a three-dimensional array")
    if output.shape[1:] != (out_h, out_w):
        raise ValueError(f"output must be {out_h}x{out_w}, got {output.shape[1]}x{output.shape[2]}")
    if output.shape[0] < len(kernels):
        raise ValueError(f"output has {output.shape[0]} channels for {len(kernels)} kernels")

    tiles_h = _tile_count(rows)
    tiles_w = _tile_count(cols)
    padded = np.zeros(
        (channels, TILE_OUT * tiles_h + 2, TILE_OUT * tiles_w + 2), dtype=np.float32
    )
    padded[:, :rows, :cols] = data
    windows = sliding_window_view(padded, (TILE_IN, TILE_IN), axis=(1, 2))[
        :, ::TILE_OUT, ::TILE_OUT
    ]

    for k, kernel in enumerate(kernels):
        for c in range(channels):
            tg = transform_kernel(kernel[c])
            y = _tiles(tg, windows[c])
            full = y.transpose(0, 2, 1, 3).reshape(tiles_h * TILE_OUT, tiles_w * TILE_OUT)
            output[k] += full[:out_h, :out_w]
    return output