"""Client for the release API that lists published ISO builds."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Mapping

log = logging.getLogger(__name__)

BASE = "https://api.pop-os.org/"

_FIELDS = ("version", "url", "size", "sha_sum", "channel", "build", "urgent")


class ApiError(Exception):
    """Base class of release API failures."""


class BuildNaNError(ApiError):
    def __init__(self, build: str) -> None:
        super().__init__(f"build ({build}) is not a number")
        self.build = build


class ApiConnectionError(ApiError):
    def __init__(self) -> None:
        super().__init__("failed to GET release API")


class ApiJsonError(ApiError):
    def __init__(self) -> None:
        super().__init__("failed to parse JSON response")


class ApiStatusError(ApiError):
    def __init__(self, status: int) -> None:
        super().__init__(f"server returned an error status: {status}")
        self.status = status


def _parse_build(build: str) -> int:
    digits = build[1:] if build.startswith("+") else build
    if not digits or not digits.isascii() or not digits.isdigit() or int(digits) > 0xFFFF:
        raise BuildNaNError(build)
    return int(digits)


@dataclass(frozen=True)
class Release:
    """A published release build."""

    version: str
    url: str
    size: int
    sha_sum: str
    channel: str
    build: int
    urgent: bool

    @classmethod
    def from_json(cls, data: "Mapping[str, Any] | str | bytes") -> "Release":
        """Build a release from an API response body or its decoded object."""
        if isinstance(data, (str, bytes, bytearray)):
            try:
                data = json.loads(data)
            except ValueError as why:
                raise ApiJsonError() from why

        if not isinstance(data, Mapping) or any(field not in data for field in _FIELDS):
            raise ApiJsonError()

        strings = ("version", "url", "sha_sum", "channel", "build", "urgent")
        size = data["size"]
        if any(not isinstance(data[field], str) for field in strings) or (
            not isinstance(size, int) or isinstance(size, bool) or size < 0
        ):
            raise ApiJsonError()

        return cls(
            version=data["version"],
            url=data["url"],
            size=size,
            sha_sum=data["sha_sum"],
            channel=data["channel"],
            build=_parse_build(data["build"]),
            urgent=data["urgent"] == "true",
        )


def get_release(version: str, channel: str) -> Release:
    """Fetch the release published for a version in a channel."""
    log.info("checking for build %s in channel %s", version, channel)
    url = f"{BASE}builds/{version}/{channel}"

    try:
        with urllib.request.urlopen(url) as response:
            status = response.status
            body = response.read()
    except urllib.error.HTTPError as why:
        raise ApiStatusError(why.code) from why
    except OSError as why:
        raise ApiConnectionError() from why

    if not 200 <= status < 300:
        raise ApiStatusError(status)

    return Release.from_json(body)


def build_exists(version: str, channel: str) -> int:
    """The build number published for a version in a channel."""
    return get_release(version, channel).build