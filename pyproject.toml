[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "simpleeq"
version = "0.1.0"
description = "Three-band equaliser DSP: Butterworth cut filters, a peak filter, parameter state and spectrum analyser paths"
requires-python = ">=3.10"
keywords = ["audio", "equalizer", "eq", "filter", "butterworth", "fft", "spectrum", "dsp"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
    "Topic :: Multimedia :: Sound/Audio",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["simpleeq"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
