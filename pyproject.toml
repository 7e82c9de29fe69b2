[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vitalsense"
version = "0.1.0"
description = "SpO2, heart-rate and body-temperature processing for MAX30102 and MAX30205 sensors"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "spo2",
    "pulse-oximetry",
    "heart-rate",
    "max30102",
    "max30205",
    "i2c",
    "body-temperature",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Healthcare Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vitalsense"]

[tool.hatch.build.targets.sdist]
include = ["vitalsense", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
