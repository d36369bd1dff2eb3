"""Ubuntu release versions, codenames and their end-of-life dates."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from pathlib import Path

OS_RELEASE = Path("/etc/os-release")

_VERSION_RE = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?")


class VersionError(ValueError):
    """Raised when a release version cannot be parsed or detected."""


@dataclass(frozen=True, order=True)
class Version:
    """An Ubuntu release version such as 20.04."""

    major: int
    minor: int
    patch: int = 0

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a version string like ``20.04`` or ``20.04.1``."""
        match = _VERSION_RE.fullmatch(text.strip())
        if match is None:
            raise VersionError(f"invalid Ubuntu version: {text!r}")
        major, minor, patch = match.groups()
        return cls(int(major), int(minor), int(patch or 0))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor:02}"


class Codename(enum.Enum):
    """Codenames of the Ubuntu releases this package knows about."""

    BIONIC = "bionic"
    COSMIC = "cosmic"
    DISCO = "disco"
    EOAN = "eoan"
    FOCAL = "focal"
    GROOVY = "groovy"
    HIRSUTE = "hirsute"
    IMPISH = "impish"
    JAMMY = "jammy"
    KINETIC = "kinetic"

    def __str__(self) -> str:
        return self.value

    def eol_date(self) -> tuple[int, int, int]:
        """The (year, month, day) on which this release reaches end of life."""
        return _EOL_DATES[self]

    def to_version(self) -> Version:
        """The version number of this release."""
        return Version(*_VERSIONS[self])

    @classmethod
    def from_version(cls, version: "Version | str") -> "Codename":
        """The codename of a release version; raises VersionError if there is none."""
        if isinstance(version, str):
            version = Version.parse(version)
        try:
            return _BY_VERSION[(version.major, version.minor)]
        except KeyError:
            raise VersionError(f"no codename for Ubuntu version {version}") from None


_VERSIONS: dict[Codename, tuple[int, int]] = {
    Codename.BIONIC: (18, 4),
    Codename.COSMIC: (18, 10),
    Codename.DISCO: (19, 4),
    Codename.EOAN: (19, 10),
    Codename.FOCAL: (20, 4),
    Codename.GROOVY: (20, 10),
    Codename.HIRSUTE: (21, 4),
    Codename.IMPISH: (21, 10),
    Codename.JAMMY: (22, 4),
    Codename.KINETIC: (22, 10),
}

_EOL_DATES: dict[Codename, tuple[int, int, int]] = {
    Codename.BIONIC: (2023, 4, 30),
    Codename.COSMIC: (2019, 7, 18),
    Codename.DISCO: (2020, 1, 18),
    Codename.EOAN: (2020, 7, 17),
    Codename.FOCAL: (2025, 4, 30),
    Codename.GROOVY: (2021, 7, 22),
    Codename.HIRSUTE: (2022, 1, 20),
    Codename.IMPISH: (2022, 7, 14),
    Codename.JAMMY: (2027, 4, 21),
    Codename.KINETIC: (2023, 7, 20),
}

_BY_VERSION: dict[tuple[int, int], Codename] = {
    numbers: codename for codename, numbers in _VERSIONS.items()
}


def detect_version() -> Version:
    """Detect the version of the running release from os-release."""
    try:
        text = Path(OS_RELEASE).read_text()
    except OSError as why:
        raise VersionError(f"failed to read {OS_RELEASE}") from why

    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if sep and key.strip() == "VERSION_ID":
            return Version.parse(value.strip().strip('"').strip("'"))

    raise VersionError(f"{OS_RELEASE} does not define VERSION_ID")