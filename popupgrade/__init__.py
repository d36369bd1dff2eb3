"""Release checks, apt source lists, recovery configuration and system repairs for Pop!_OS upgrades."""

__version__ = "0.1.0"