[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hackcon"
version = "0.1.0"
description = "Arbitrary-ratio audio resampling, emulator debugger descriptions, typed memory access and generational handles"
requires-python = ">=3.10"
dependencies = []
keywords = ["resampler", "audio", "sample-rate", "sinc", "emulator", "debugger", "memory", "handles"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Conversion",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["hackcon"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
