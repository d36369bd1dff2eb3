[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "popupgrade"
version = "0.1.0"
description = "Source-list, recovery-configuration, repair and release-check helpers for Pop!_OS upgrades"
requires-python = ">=3.10"
dependencies = []
keywords = ["apt", "upgrade", "release", "recovery", "crypttab", "ubuntu", "end-of-life"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Software Distribution",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["popupgrade"]

[tool.pytest.ini_options]
addopts = "-ra"
