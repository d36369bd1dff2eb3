# popupgrade

Helpers for preparing and checking release upgrades on a Pop!_OS system:
release lookups, end-of-life checks, apt source-list management, recovery
partition configuration and a handful of system repairs. It is a library;
it installs no commands.

It needs nothing beyond the Python standard library and supports Python 3.10
and later. Most functions read or change files under `/etc`, `/boot/efi`,
`/recovery` and `/home`, so on a real system they must run as root.

## Modules

- `popupgrade.ubuntu`: `Version` (parsed with `Version.parse("20.04")`),
  `Codename` with `eol_date()`, `to_version()` and `Codename.from_version()`,
  and `detect_version()`, which reads `VERSION_ID` from `/etc/os-release`.
  Problems raise `VersionError`.
- `popupgrade.eol`: `EolDate` (`from_codename`, `fetch`) and its
  `status()` / `status_from(date)`, returning an `EolStatus` of `OK`,
  `IMMINENT` (within 30 days, 7 for groovy) or `EXCEEDED`.
- `popupgrade.release_api`: `get_release(version, channel)` and
  `build_exists(version, channel)` query the release API and return a
  `Release` or its build number. Failures raise `ApiError` subclasses:
  `ApiConnectionError`, `ApiStatusError`, `ApiJsonError`, `BuildNaNError`.
- `popupgrade.check`: `release_str(major, minor)`, `current(version)`,
  `next_release(development)` and `next_status(current, development,
  release_check)`, which give a `ReleaseStatus` holding a `BuildStatus`.
  `BuildStatus.status_code()` is the build number, or -1 (internal issue),
  -2 (server status), -3 (connection issue) or -4 (blacklisted).
- `popupgrade.repos`: apt source lists. `backup`, `restore`,
  `disable_third_parties`, `apply_default_source_lists`, `repair`,
  `replace_with_old_releases`, `is_old_release`, `is_eol`, `iter_files` and
  `is_save_file`.
- `popupgrade.recovery_version`: `RecoveryVersion.parse(text)`,
  `recovery_file()` and `version()`, which reads `/recovery/version` or falls
  back to the codename in the recovery partition's `Release` file. Raises
  `RecoveryVersionError`.
- `popupgrade.recovery_conf`: `EnvFile` for `KEY=VALUE` files, and
  `mode_is`, `mode_set`, `mode_unset` and `upgrade_prereq` for
  `/recovery/recovery.conf` and the systemd-boot prerequisites.
- `popupgrade.crypttab`: `cryptswap_plain_warning(text)` and `repair()`,
  which add `plain` to swap entries in `/etc/crypttab`.
- `popupgrade.fstab`: `repair()` and `mount_required_partitions()`, which run
  `mount` for `/` and `/boot/efi` on EFI systems; raises `FstabError`.
- `popupgrade.repair_misc`: `human_compare(a, b)`, `dkms_gcc9_fix()` and
  `wipe_pulse()`.
- `popupgrade.misc`: `create`, `open_file`, `cp`, `format_build_number`,
  `format_error`, `parse_whitespace_conf`, `uid_min_max`, and
  `disable_gnome_extensions` / `disable_extensions_for` / `extension_path`,
  which move users' gnome-shell extensions aside to a `.bak` directory.
- `popupgrade.system`: `SystemEnvironment.detect()`, `detect_arch()`
  (`"nvidia"` or `"intel"` from the PCI vendor IDs), `findmnt_uuid(path)`,
  `install_time()`, `install_since()`, `current_time()`,
  `development_releases_enabled()`, and `init_signals()` / `signal_status()`
  for recording SIGINT, SIGHUP, SIGTERM and SIGTSTP as a `Signal`.
- `popupgrade.errors`: `ReleaseError`, `RecoveryError` and `RepairError`,
  each carrying a `kind` from `ReleaseErrorKind`, `RecoveryErrorKind` or
  `RepairErrorKind`.

## Examples

```python
from popupgrade.check import release_str

release_str(20, 4)   # "20.04"
```

```python
import datetime
from popupgrade.eol import EolDate
from popupgrade.ubuntu import Codename

disco = EolDate.from_codename(Codename.DISCO)
disco.status_from(datetime.date(2020, 1, 17))   # EolStatus.IMMINENT
```

```python
from popupgrade.crypttab import cryptswap_plain_warning

with open("/etc/crypttab") as handle:
    fixed = cryptswap_plain_warning(handle.read())
if fixed is not None:
    print("crypttab needs repair")
```

```python
from popupgrade.recovery_version import RecoveryVersion

info = RecoveryVersion.parse("20.04 12")
info.version, info.build   # ("20.04", 12)
```

## What it does not do

The package has no command-line tool and no background service. It does not
run apt or dpkg to fetch, install or hold packages, does not carry out a
release upgrade from start to finish, does not download or sync a recovery
ISO onto the recovery partition, and does not edit the systemd-boot loader
configuration. Its pieces check and prepare a system; driving a full upgrade
is left to the caller.