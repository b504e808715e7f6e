[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stepdrive"
version = "0.1.0"
description = "Accelerated stepper motor control, an ultrasonic speed controller and an RGB rainbow sequence over a simulated microcontroller board"
requires-python = ">=3.10"
dependencies = []
keywords = ["stepper", "motor", "acceleration", "simulation", "ultrasonic", "rgb", "led"]
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
    "Topic :: Software Development :: Embedded Systems",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["stepdrive"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
