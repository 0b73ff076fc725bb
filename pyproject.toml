[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zcommon"
version = "1.8.0"
description = "Levelled logging, a buffer ring, signals, struct reflection with XML, timers and UDP/TCP helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "ring-buffer", "signals", "reflection", "xml", "timers", "udp", "tcp", "multicast"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Logging",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["zcommon"]

[tool.pytest.ini_options]
addopts = "-ra"
