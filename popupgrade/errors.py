"""Errors raised by the release, recovery and repair operations."""

from __future__ import annotations

import enum
from typing import Any, ClassVar


class RepairErrorKind(enum.Enum):
    """What part of a system repair failed."""

    CRYPTTAB = "failed to correct errors in crypttab"
    DKMS_GCC9 = "unable to apply dkms gcc9 fix"
    FSTAB = "error checking and fixing fstab"
    INVALID_VERSION = "version is not an ubuntu codename: {version}"
    PACKAGING = "packaging error"
    WIPE_PULSE = "failed to wipe pulseaudio settings for users"


class ReleaseErrorKind(enum.Enum):
    """What part of a release upgrade failed."""

    APT_LIST = "failed to fetch apt URIs to fetch"
    APT_PURGE = "failed to purge packages"
    BACKUP_PPAS = "failed to back up system sources"
    CHECK = "unable to upgrade to next release: {source!r}"
    COMMAND = "failed to launch command"
    CONFLICT_REMOVAL = "conflicting and/or deprecated packages could not be removed"
    CURRENT_UPDATE = "failed to update package lists for the current release"
    DISABLE_PPAS = "unable to disable third party repositories"
    DPKG_CONFIGURE = "status for `dpkg --configure -a` failed"
    FIX_BROKEN = "status for `apt-get install -f` failed"
    HOLD_POP_UPGRADE = "failed to hold the pop-upgrade package"
    LOCK = "unable to hold apt/dpkg lock files"
    NOT_ROOT = "root is required for this action: rerun with `sudo`"
    OLD_RELEASE_SWITCH = "failed to switch Ubuntu repos to old-releases"
    PACKAGE_FETCH = "fetch of package failed: {source!r}"
    PRE_UPGRADE = "failed to apply pre-upgrade fixes"
    READING_PARTITIONS = "failed to read the /proc/partitions file"
    RECOVERY_CONF = "error updating recovery configuration file"
    RECOVERY_CONF_OPEN = "failed to open the recovery configuration file"
    RECOVERY_UPDATE = "failed to update the recovery configuration file"
    RECOVERY_NOT_FOUND = "recovery parttiion was not found"
    RELEASE_ARCH = "failed to fetch release architecture"
    RELEASE_UPDATE = "failed to update package lists for the new release"
    RELEASE_UPGRADE = "failed to perform release upgrade"
    RELEASE_VERSION = "failed to fetch release versions"
    REPAIR = "failed to apply system repair before upgrade"
    SIMULATION = "failure to simulate upgrade"
    SYSTEMD_UPGRADE_FILES_MISSING = "files required for systemd upgrade are missing: {files!r}"
    UNHOLD_POP_UPGRADE = "failed to unhold the pop-upgrade package"
    UPGRADE = "failed to perform apt upgrade of the current release"
    INSTALL_CORE = (
        "unable to install core packages: a package may be preventing pop-desktop from being "
        "installed"
    )
    STARTUP_FILE_CREATION = "failed to create /pop-upgrade file"
    SYSTEMD_BOOT = "failed to modify systemd-boot configuration: {source}"
    SYSTEMD_BOOT_EFI_PATH_NOT_FOUND = (
        "attempted recovery-based upgrade method, but the systemd efi loader path was not found"
    )
    SYSTEMD_BOOT_LOADER_NOT_FOUND = (
        "attempted recovery-based upgrade method, but the systemd boot loader was not found"
    )
    TRANSITIONAL_SNAP_FETCH = "failed to get transitional snap packages"
    TRANSITIONAL_SNAP_HOLD = "failed to hold transitional snap package"
    TRANSITIONAL_SNAP_RECORD = "failed to record held transitional snap packages"
    MISSING_RECOVERY_ENTRY = "recovery entry not found in systemd-boot loader config"


class RecoveryErrorKind(enum.Enum):
    """What part of a recovery partition upgrade failed."""

    API_ERROR = "failed to fetch release data from server"
    ANYHOW = "generic error"
    CANCELLED = "process has been cancelled"
    CHECKSUM = 'checksum for "{path}" failed: {source}'
    DOWNLOAD = "failed to download ISO"
    FETCH = "fetching from {url} failed: {source}"
    ISO_NOT_FOUND = "ISO does not exist at path"
    MOUNTS = "failed to fetch mount points"
    NO_BUILD_AVAILABLE = "no build was found to fetch"
    TEMP_DIR = "failed to create temporary directory for ISO"
    RECOVERY_NOT_FOUND = "recovery partition was not found"
    REPAIR = "failed to apply system repair before recovery upgrade"
    EFI_NOT_FOUND = "EFI partition was not found"
    RELEASE_ARCH = "failed to fetch release architecture"
    RELEASE_VERSION = "failed to fetch release versions"
    UNSUPPORTED = "the recovery feature is limited to EFI installs"
    WRITE_VERSION = "failed to write version of ISO now stored on the recovery partition"


class _KindedError(Exception):
    """An error identified by a kind, whose message may carry details."""

    kind_type: ClassVar[type[enum.Enum]]

    def __init__(self, kind: enum.Enum, **details: Any) -> None:
        if not isinstance(kind, self.kind_type):
            raise TypeError(f"{type(self).__name__} requires a {self.kind_type.__name__}")
        try:
            message = kind.value.format(**details)
        except KeyError as missing:
            raise TypeError(f"{kind.name} requires the detail {missing}") from None
        super().__init__(message)
        self.kind = kind
        self.details = details


class RepairError(_KindedError):
    """Raised when repairing the system fails."""

    kind_type = RepairErrorKind


class ReleaseError(_KindedError):
    """Raised when a release upgrade fails."""

    kind_type = ReleaseErrorKind


class RecoveryError(_KindedError):
    """Raised when upgrading the recovery partition fails."""

    kind_type = RecoveryErrorKind