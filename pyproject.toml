[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nachos"
version = "0.1.0"
description = "A small instructional operating system kernel: threads, synchronization, address spaces, system calls and a COFF to NOFF converter"
requires-python = ">=3.10"
dependencies = []
keywords = ["operating-system", "kernel", "threads", "semaphore", "noff", "coff", "education"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
coff2noff = "nachos.coff2noff:main"

[tool.hatch.build.targets.wheel]
packages = ["nachos"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
