# kuiperkernels

Small numeric building blocks for a CPU inference engine, built on NumPy.
Arithmetic is carried out in 32-bit floats (or 32-bit integers where noted),
so results match what packed single-precision code produces, rounding
included.

## Install

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Modules

### `kuiperkernels.quantize`

Float to signed 8-bit conversion with symmetric saturation at ±127.

- `float2int8(v)` rounds half away from zero and clamps to `[-127, 127]`.
  It raises `ValueError` for NaN or infinite input.
- `quantize_lanes(values)` quantizes a sequence as 32-bit float lanes: each
  value is pushed half a unit away from zero in 32-bit arithmetic and
  truncated. NaN and values beyond the 32-bit integer range become `-127`.
  Returns a list of ints.
- `pack_int8(values)` quantizes the lanes as above and returns them as
  two's-complement `bytes`.

### `kuiperkernels.arith`

Lane-wise 32-bit float arithmetic.

- `reduce_add(values)` and `reduce_max(values)` fold a vector into one value by
  repeatedly combining its lower half with its upper half. The lane count must
  be a positive power of two.
- `reduce_add_int32(values)` sums 32-bit integer lanes with wrap-around; each
  value must fit 32 bits and the lane count must be a power of two.
- `fmadd(a, b, c)` gives `a * b + c`; `fnmadd(a, b, c)` gives `c - a * b`.
- `fmadd_scalar(a, b, c)` gives `a + b * c` and `fmrsub_scalar(a, b, c)` gives
  `a - b * c`, with the scalar `c` broadcast to every lane.
- `fmadd_lanes(total, weights, values)` adds `sum(w_i * v_i)` to `total`, four
  products at a time as `(p0 + p1) + (p2 + p3)`. The number of weight and value
  vectors must match and be a positive multiple of four.
- `horizontal_sums(*args)` takes 3, 4 or 8 eight-lane vectors and returns the
  sum of each; with three vectors a fourth, zero, lane is added.

All vector inputs must be one-dimensional and of matching length; otherwise
`ValueError` is raised.

### `kuiperkernels.shuffle`

- `transpose(rows)` returns the plain transpose of a rectangular block of rows.
- `transpose_packed(rows, lane_width)` treats `len(rows)` rows of `lane_width`
  lanes as a matrix, transposes it, and lays the result out row-major across
  the same number of rows of `lane_width` lanes. The shape and element type are
  kept, so 16-bit integer lanes stay 16-bit.

### `kuiperkernels.winograd`

3x3, stride-1 convolution by the Winograd F(4x4, 3x3) algorithm. Tensors are
arrays shaped `(channels, rows, cols)`.

- `transform_kernel(g)` turns a 3x3 kernel into its 6x6 transformed form.
- `winograd_tile(transform_g, tile)` correlates one 6x6 input tile with a
  transformed kernel and returns a 4x4 output tile.
- `convolution_3x3s1(input, weights, output=None)` convolves the input with
  each `(channels, 3, 3)` kernel in `weights`, without padding. Kernel `k` is
  accumulated into channel `k` of `output`; when `output` is `None` or empty, a
  zero array of shape `(len(weights), rows - 2, cols - 2)` is created. The
  output array is returned.

## Example

    import numpy as np
    from kuiperkernels.winograd import convolution_3x3s1

    image = np.random.rand(3, 16, 16).astype(np.float32)
    kernels = [np.random.rand(3, 3, 3).astype(np.float32) for _ in range(8)]
    result = convolution_3x3s1(image, kernels)
    print(result.shape)  # (8, 14, 14)

## What it does not do

This is a library of kernels only. It has no tensor class, no model or graph
loading, no layers other than the 3x3 stride-1 convolution, and no
command-line tool.