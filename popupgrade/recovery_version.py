"""The release version stored on the recovery partition."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from popupgrade.ubuntu import Codename

RECOVERY_VERSION = "/recovery/version"
RECOVERY_RELEASE = "/recovery/dists/stable/Release"

_I16_RE = re.compile(r"[+-]?[0-9]+")


class RecoveryVersionError(Exception):
    """Raised when the recovery partition's version cannot be determined."""


def _parse_i16(text: str) -> int:
    if _I16_RE.fullmatch(text) is None:
        raise RecoveryVersionError("build version in recovery version file is not a number")
    value = int(text)
    if not -0x8000 <= value <= 0x7FFF:
        raise RecoveryVersionError("build version in recovery version file is not a number")
    return value


@dataclass(frozen=True)
class RecoveryVersion:
    """A release version and build number."""

    version: str
    build: int

    @classmethod
    def parse(cls, text: str) -> "RecoveryVersion":
        """Parse ``<version> <build>`` as written in the recovery version file."""
        fields = text.split()
        if not fields:
            raise RecoveryVersionError("no version found in recovery version file")
        if len(fields) < 2:
            raise RecoveryVersionError("no build number found in recovery version file")
        return cls(fields[0], _parse_i16(fields[1]))


def recovery_file() -> str:
    """The contents of the recovery version file."""
    return Path(RECOVERY_VERSION).read_text()


def version() -> RecoveryVersion:
    """The version installed on the recovery partition."""
    if Path(RECOVERY_VERSION).exists():
        try:
            text = recovery_file()
        except OSError as why:
            raise RecoveryVersionError("failed to read recovery version file") from why
        return RecoveryVersion.parse(text)

    try:
        lines = Path(RECOVERY_RELEASE).read_text().splitlines()
    except OSError as why:
        raise RecoveryVersionError("failed to read recovery version file") from why

    for line in lines:
        if not line.startswith("Codename:"):
            continue
        fields = line.split()
        if len(fields) < 2:
            continue
        try:
            codename = Codename(fields[1])
        except ValueError as why:
            raise RecoveryVersionError("recovery has unknown release codename") from why
        return RecoveryVersion(str(codename.to_version()), 0)

    raise RecoveryVersionError("recovery partition is corrupt")