"""Checks for the current and next available releases."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable

from popupgrade.release_api import (
    ApiConnectionError,
    ApiError,
    ApiStatusError,
    build_exists,
)
from popupgrade.ubuntu import Version, VersionError, detect_version

log = logging.getLogger(__name__)

BIONIC = "18.04"
FOCAL = "20.04"
GROOVY = "20.10"
HIRSUTE = "21.04"
IMPISH = "21.10"
JAMMY = "22.04"
UNKNOWN = "22.04"

_UNSUPPORTED = "this version of pop-upgrade is not supported on this release"

_RELEASES = {
    (18, 4): BIONIC,
    (20, 4): FOCAL,
    (20, 10): GROOVY,
    (21, 4): HIRSUTE,
    (21, 10): IMPISH,
    (22, 4): JAMMY,
    (22, 10): UNKNOWN,
}


@dataclass(frozen=True)
class BuildStatus:
    """Whether a build of the next release is available, or why not."""

    class Kind(enum.Enum):
        BLACKLISTED = "blacklisted"
        BUILD = "build"
        CONNECTION_ISSUE = "connection issue"
        INTERNAL_ISSUE = "internal issue"
        SERVER_STATUS = "server status"

    kind: "BuildStatus.Kind"
    build: "int | None" = None
    error: "Exception | None" = field(default=None, compare=False)

    def is_ok(self) -> bool:
        return self.kind is BuildStatus.Kind.BUILD

    def status_code(self) -> int:
        """The build number, or a negative code describing why there is none."""
        kind = self.kind
        if kind is BuildStatus.Kind.BUILD:
            return (((self.build or 0) + 0x8000) & 0xFFFF) - 0x8000
        return {
            BuildStatus.Kind.CONNECTION_ISSUE: -3,
            BuildStatus.Kind.SERVER_STATUS: -2,
            BuildStatus.Kind.INTERNAL_ISSUE: -1,
            BuildStatus.Kind.BLACKLISTED: -4,
        }[kind]

    @classmethod
    def from_result(cls, fetch: Callable[[], int]) -> "BuildStatus":
        """Classify the outcome of a build lookup."""
        try:
            build = fetch()
        except ApiConnectionError as why:
            return cls(cls.Kind.CONNECTION_ISSUE, error=why)
        except ApiStatusError as why:
            return cls(cls.Kind.SERVER_STATUS, error=why)
        except ApiError as why:
            return cls(cls.Kind.INTERNAL_ISSUE, error=why)
        return cls(cls.Kind.BUILD, build=build)


@dataclass(frozen=True)
class ReleaseStatus:
    """The current release, the next one, and whether it can be upgraded to."""

    current: str
    next: str
    build: BuildStatus
    is_lts: bool


def next_release(development: bool) -> ReleaseStatus:
    """The upgrade status of the running release."""
    current_version = detect_version()
    return next_status(
        current_version,
        development,
        lambda version: BuildStatus.from_result(lambda: build_exists(version, "intel")),
    )


def current(version: "str | None") -> tuple[str, int]:
    """The release version to use and its published build."""
    log.info("Checking for current release of %r", version)

    if version is None:
        try:
            detected = detect_version()
        except VersionError as why:
            raise VersionError("cannot detect current version of Pop") from why
        version = release_str(detected.major, detected.minor)

    try:
        build = build_exists(version, "intel")
    except ApiError as why:
        raise ApiError(f"failed to find build for {version}") from why

    return version, build


def release_str(major: int, minor: int) -> str:
    """The version string of a supported release."""
    try:
        return _RELEASES[(major, minor)]
    except KeyError:
        raise ValueError(_UNSUPPORTED) from None


def next_status(
    current: Version,
    development: bool,
    release_check: Callable[[str], BuildStatus],
) -> ReleaseStatus:
    """Decide which release follows ``current`` and whether it is available."""

    def available(is_lts: bool, this: str, following: str) -> ReleaseStatus:
        return ReleaseStatus(this, following, release_check(following), is_lts)

    def blacklisted(is_lts: bool, this: str, following: str) -> ReleaseStatus:
        return ReleaseStatus(this, following, BuildStatus(BuildStatus.Kind.BLACKLISTED), is_lts)

    def development_enabled(is_lts: bool, this: str, following: str) -> ReleaseStatus:
        if development:
            return available(is_lts, this, following)
        return blacklisted(is_lts, this, following)

    key = (current.major, current.minor)
    if key == (18, 4):
        return available(True, BIONIC, FOCAL)
    if key == (20, 4):
        return available(True, FOCAL, IMPISH)
    if key == (20, 10):
        return available(False, GROOVY, HIRSUTE)
    if key == (21, 4):
        return available(False, HIRSUTE, IMPISH)
    if key == (21, 10):
        return development_enabled(False, IMPISH, JAMMY)
    if key == (22, 4):
        return blacklisted(True, JAMMY, UNKNOWN)
    raise ValueError(_UNSUPPORTED)