"""File helpers, error formatting, login.defs parsing and GNOME extension handling."""

from __future__ import annotations

import logging
import os
import pwd
import shutil
from pathlib import Path
from typing import BinaryIO

log = logging.getLogger(__name__)

LOGIN_DEFS = "/etc/login.defs"
HOME_ROOT = "/home"


class LoginDefsError(Exception):
    """Raised when UID_MIN and UID_MAX cannot be read from login.defs."""


def create(path: "str | os.PathLike[str]") -> BinaryIO:
    """Create (or truncate) a file for binary writing."""
    try:
        return open(path, "wb")
    except OSError as why:
        raise OSError(f"unable to create file at {os.fspath(path)!r}: {why}") from why


def open_file(path: "str | os.PathLike[str]") -> BinaryIO:
    """Open an existing file for binary reading."""
    try:
        return open(path, "rb")
    except OSError as why:
        raise OSError(f"unable to open file at {os.fspath(path)!r}: {why}") from why


def cp(src: "str | os.PathLike[str]", dst: "str | os.PathLike[str]") -> int:
    """Copy a file with its permissions, returning the number of bytes copied."""
    try:
        shutil.copyfile(src, dst)
        shutil.copymode(src, dst)
        return os.path.getsize(dst)
    except OSError as why:
        raise OSError(
            f"failed to copy {os.fspath(src)!r} to {os.fspath(dst)!r}: {why}"
        ) from why


def format_build_number(value: int) -> str:
    """Render a build number, with negative numbers meaning no build."""
    return "false" if value < 0 else str(value)


def format_error(error: BaseException) -> str:
    """Render an error followed by each of its causes, separated by colons."""
    parts = []
    current: "BaseException | None" = error
    while current is not None:
        parts.append(str(current))
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None
    return ": ".join(parts)


def parse_whitespace_conf(text: str) -> dict[str, str]:
    """Parse a ``KEY value`` configuration file, skipping blanks and comments."""
    entries: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition(" ") if " " in line else line.partition("\t")
        fields = line.split(None, 1)
        key = fields[0]
        value = fields[1].strip() if len(fields) > 1 else ""
        entries[key] = value
    return entries


def uid_min_max() -> tuple[int, int]:
    """The range of UIDs given to regular users."""
    try:
        text = Path(LOGIN_DEFS).read_text()
    except OSError as why:
        raise LoginDefsError(f"could not read {LOGIN_DEFS}") from why

    defs = parse_whitespace_conf(text)
    if "UID_MIN" not in defs or "UID_MAX" not in defs:
        raise LoginDefsError(f"{LOGIN_DEFS} does not contain UID_MIN + UID_MAX")

    return _parse_uid(defs["UID_MIN"], "UID_MIN"), _parse_uid(defs["UID_MAX"], "UID_MAX")


def _parse_uid(value: str, name: str) -> int:
    if not value.isascii() or not value.isdigit() or int(value) > 0xFFFF_FFFF:
        raise LoginDefsError(f"{name} is not a u32 value")
    return int(value)


def extension_path(user: str) -> str:
    """Where a user's gnome-shell extensions are installed."""
    return str(Path(HOME_ROOT) / user / ".local/share/gnome-shell/extensions")


def disable_extensions_for(user: str) -> None:
    """Move a user's extensions aside to a ``.bak`` directory, logging failures."""
    path = Path(extension_path(user))
    if not path.exists():
        return

    log.info("disabling extensions for %s", user)
    backup = Path(f"{path}.bak")

    try:
        if backup.exists():
            try:
                shutil.rmtree(backup)
            except OSError as why:
                raise OSError(f"cannot remove extensions backup: {why}") from why
        try:
            os.rename(path, backup)
        except OSError as why:
            raise OSError(f"cannot backup extensions: {why}") from why
    except OSError as why:
        log.error("failed to disable gnome-shell extensions for %s: %s", user, why)


def disable_gnome_extensions() -> None:
    """Disable gnome-shell extensions of every regular user."""
    log.info("attempting to disable gnome-shell extensions")
    uid_min, uid_max = uid_min_max()
    for user in pwd.getpwall():
        if uid_min <= user.pw_uid <= uid_max:
            disable_extensions_for(user.pw_name)