"""Facts about the running system: install time, firmware, signals and hardware."""

from __future__ import annotations

import enum
import os
import signal
import subprocess
import time
from pathlib import Path

DBUS_NAME = "com.system76.PopUpgrade"
DBUS_PATH = "/com/system76/PopUpgrade"
DBUS_IFACE = "com.system76.PopUpgrade"

DEVELOPMENT_RELEASE_FILE = "/etc/pop-upgrade/devel"

VAR_LIB_DIR = "/var/lib/pop-upgrade"
TRANSITIONAL_SNAPS = "/var/lib/pop-upgrade/transitional_snaps"
RESTART_SCHEDULED = "/var/lib/pop-upgrade/restarting"

MACHINE_ID = "/etc/machine-id"
EFI_FIRMWARE_DIR = "/sys/firmware/efi"
PCI_DEVICES_DIR = "/sys/bus/pci/devices"

VID_NVIDIA = 0x10DE


def development_releases_enabled() -> bool:
    """Whether upgrades to development releases have been enabled."""
    return Path(DEVELOPMENT_RELEASE_FILE).exists()


def install_time() -> int:
    """The time at which this OS was installed, as seconds since the Unix epoch."""
    return int(os.stat(MACHINE_ID).st_ctime)


def install_since() -> int:
    """The number of seconds since the install date."""
    return current_time() - install_time()


def current_time() -> int:
    """Seconds since the Unix epoch, at this moment."""
    return max(int(time.time()), 0)


class SystemEnvironment(enum.Enum):
    """Whether the system booted in legacy BIOS or EFI mode."""

    LEGACY_BIOS = "legacy-bios"
    EFI = "efi"

    @classmethod
    def detect(cls) -> "SystemEnvironment":
        return cls.EFI if Path(EFI_FIRMWARE_DIR).is_dir() else cls.LEGACY_BIOS


def findmnt_uuid(path: "str | os.PathLike[str]") -> str:
    """The UUID of the device mounted at ``path``."""
    try:
        result = subprocess.run(
            ["findmnt", "-n", "-o", "UUID", os.fspath(path)],
            stdout=subprocess.PIPE,
            text=True,
            check=False,
        )
    except OSError as why:
        raise FileNotFoundError(f"findmnt: {why}") from why

    lines = result.stdout.splitlines()
    if not lines:
        raise FileNotFoundError("findmnt: uuid not found for device")
    return lines[0]


class Signal(enum.IntEnum):
    """Signals the daemon reacts to."""

    INTERRUPT = 1
    HANGUP = 2
    TERMINATE = 3
    TERM_STOP = 4

    def __str__(self) -> str:
        return _SIGNAL_LABELS[self]


_SIGNAL_LABELS = {
    Signal.INTERRUPT: "interrupt",
    Signal.HANGUP: "hangup",
    Signal.TERMINATE: "terminate",
    Signal.TERM_STOP: "term stop",
}

_OS_SIGNALS = {
    signal.SIGINT: Signal.INTERRUPT,
    signal.SIGHUP: Signal.HANGUP,
    signal.SIGTERM: Signal.TERMINATE,
    signal.SIGTSTP: Signal.TERM_STOP,
}

_pending: "Signal | None" = None


def signal_status() -> "Signal | None":
    """Take the most recently received signal, clearing it."""
    global _pending
    received, _pending = _pending, None
    return received


def _handler(signum: int, _frame: object) -> None:
    global _pending
    _pending = _OS_SIGNALS[signum]


def init_signals() -> None:
    """Record SIGHUP, SIGTSTP, SIGINT and SIGTERM instead of acting on them."""
    for signum in (signal.SIGHUP, signal.SIGTSTP, signal.SIGINT, signal.SIGTERM):
        signal.signal(signum, _handler)


class ReleaseArchError(Exception):
    """Raised when PCI devices cannot be probed."""


def detect_arch() -> str:
    """Return "nvidia" if any NVIDIA PCI device is present, otherwise "intel"."""
    try:
        devices = sorted(Path(PCI_DEVICES_DIR).iterdir())
    except OSError as why:
        raise ReleaseArchError("error when probing PCI device") from why

    for device in devices:
        try:
            vendor = int((device / "vendor").read_text().strip(), 16)
        except (OSError, ValueError) as why:
            raise ReleaseArchError("error fetching vendor ID of PCI device") from why
        if vendor == VID_NVIDIA:
            return "nvidia"

    return "intel"