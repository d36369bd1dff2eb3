"""The recovery partition's configuration file and upgrade prerequisites."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from popupgrade.errors import ReleaseError, ReleaseErrorKind

RECOVERY_CONF = "/recovery/recovery.conf"
SYSTEMD_BOOT_LOADER_PATH = "/boot/efi/loader"
SYSTEMD_BOOT_LOADER = "/boot/efi/EFI/systemd/systemd-bootx64.efi"
PROC_MOUNTS = "/proc/mounts"


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


@dataclass
class EnvFile:
    """A file of ``KEY=VALUE`` lines."""

    path: Path
    store: dict[str, str] = field(default_factory=dict)

    @classmethod
    def load(cls, path: "str | os.PathLike[str]") -> "EnvFile":
        path = Path(path)
        store: dict[str, str] = {}
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition("=")
            if sep:
                store[key.strip()] = _unquote(value.strip())
        return cls(path, store)

    def get(self, key: str) -> "str | None":
        return self.store.get(key)

    def update(self, key: str, value: str) -> "EnvFile":
        """Set a value, returning the file so updates can be chained."""
        self.store[key] = value
        return self

    def remove(self, key: str) -> "str | None":
        return self.store.pop(key, None)

    def write(self) -> None:
        self.path.write_text("".join(f"{key}={value}\n" for key, value in sorted(self.store.items())))


def _open_conf() -> EnvFile:
    try:
        return EnvFile.load(RECOVERY_CONF)
    except (OSError, ValueError) as why:
        raise ReleaseError(ReleaseErrorKind.RECOVERY_CONF_OPEN) from why


def _write_conf(envfile: EnvFile) -> None:
    try:
        envfile.write()
    except OSError as why:
        raise ReleaseError(ReleaseErrorKind.RECOVERY_UPDATE) from why


def mode_is(option: str) -> bool:
    """Whether the recovery configuration's MODE is ``option``."""
    return _open_conf().get("MODE") == option


def mode_set(mode: str, prev_boot: str) -> None:
    """Set the recovery MODE and the boot entry to return to afterwards."""
    _write_conf(_open_conf().update("MODE", mode).update("PREV_BOOT", prev_boot))


def mode_unset() -> None:
    """Remove MODE and PREV_BOOT from the recovery configuration."""
    envfile = _open_conf()
    envfile.remove("MODE")
    envfile.remove("PREV_BOOT")
    _write_conf(envfile)


def upgrade_prereq() -> None:
    """Check that the system can boot into a mounted recovery partition."""
    if not Path(SYSTEMD_BOOT_LOADER).exists():
        raise ReleaseError(ReleaseErrorKind.SYSTEMD_BOOT_LOADER_NOT_FOUND)

    if not Path(SYSTEMD_BOOT_LOADER_PATH).exists():
        raise ReleaseError(ReleaseErrorKind.SYSTEMD_BOOT_EFI_PATH_NOT_FOUND)

    try:
        partitions = Path(PROC_MOUNTS).read_text()
    except (OSError, ValueError) as why:
        raise ReleaseError(ReleaseErrorKind.READING_PARTITIONS) from why

    if "/recovery" not in partitions:
        raise ReleaseError(ReleaseErrorKind.RECOVERY_NOT_FOUND)