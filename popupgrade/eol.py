"""End-of-life status of Ubuntu releases."""

from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass

from popupgrade.ubuntu import Codename, Version, VersionError, detect_version


class EolStatus(enum.Enum):
    """How close a release is to its end of life."""

    OK = "ok"
    IMMINENT = "imminent"
    EXCEEDED = "exceeded"


@dataclass(frozen=True)
class EolDate:
    """The end-of-life date of a release."""

    codename: Codename
    version: Version
    ymd: tuple[int, int, int]

    @classmethod
    def from_codename(cls, codename: Codename) -> "EolDate":
        return cls(codename, codename.to_version(), codename.eol_date())

    @classmethod
    def fetch(cls) -> "EolDate":
        """The end-of-life date of the running release."""
        try:
            version = detect_version()
        except VersionError as why:
            raise VersionError("failed to detect current Ubuntu release") from why
        try:
            codename = Codename.from_version(version)
        except VersionError as why:
            raise VersionError(f"Invalid Ubuntu version: {version}") from why
        return cls(codename, version, codename.eol_date())

    def status(self) -> EolStatus:
        """The status as of today in UTC."""
        return self.status_from(datetime.datetime.now(datetime.timezone.utc).date())

    def status_from(self, date: datetime.date) -> EolStatus:
        """The status as of the given date."""
        eol = datetime.date(*self.ymd)
        if date >= eol:
            return EolStatus.EXCEEDED
        days_until = (eol - date).days
        days_left = 7 if self.codename is Codename.GROOVY else 30
        if 0 <= days_until <= days_left:
            return EolStatus.IMMINENT
        return EolStatus.OK