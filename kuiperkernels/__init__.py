"""Numeric kernels: int8 quantization, 32-bit lane arithmetic, transposes and Winograd 3x3 convolution."""

__version__ = "0.1.0"
__all__ = ["quantize", "arith", "shuffle", "winograd"]