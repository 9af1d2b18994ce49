[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kuiperkernels"
version = "0.1.0"
description = "Numeric kernels for CPU inference: int8 quantization, 32-bit lane arithmetic, register-block transposes and Winograd 3x3 convolution on NumPy."
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["inference", "convolution", "winograd", "quantization", "int8", "numpy"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kuiperkernels"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
