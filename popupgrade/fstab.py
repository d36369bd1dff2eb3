"""Validation of the mounts that upgrades rely on."""

from __future__ import annotations

import subprocess

from popupgrade.system import SystemEnvironment

MOUNT_POINTS = ("/", "/boot/efi")

# 0: an unmounted drive was mounted; 32: it was already mounted.
_MOUNT_OK = (0, 32)


class FstabError(Exception):
    """Raised when the required partitions cannot be mounted."""

    def __init__(self) -> None:
        super().__init__("failed to mount devices with `mount -a`")


def repair() -> None:
    """On EFI systems, ensure that the required partitions are mounted."""
    if SystemEnvironment.detect() is not SystemEnvironment.EFI:
        return

    try:
        mount_required_partitions()
    except OSError as why:
        raise FstabError() from why


def mount_required_partitions() -> None:
    """Mount the root and EFI partitions if they are not mounted already."""
    for mount_point in MOUNT_POINTS:
        try:
            result = subprocess.run(["mount", mount_point], check=False)
        except OSError as why:
            raise OSError("failed to spawn mount command") from why

        if result.returncode not in _MOUNT_OK:
            raise OSError(f"failed to mount `{mount_point}` partition")