"""Management of the apt source lists: backups, restores and release defaults."""

from __future__ import annotations

import logging
import os
import re
import shutil
import urllib.request
from pathlib import Path
from typing import Iterator

from popupgrade.eol import EolDate, EolStatus
from popupgrade.ubuntu import Codename

log = logging.getLogger(__name__)

SOURCES_LIST = "/etc/apt/sources.list"
PPA_DIR = "/etc/apt/sources.list.d"
SYSTEM_SOURCES = "/etc/apt/sources.list.d/system.sources"
PROPRIETARY_SOURCES = "/etc/apt/sources.list.d/pop-os-apps.sources"
GROOVY_PPA = "/etc/apt/sources.list.d/pop-os-ppa.list"
IMPISH_RELEASE = "/etc/apt/sources.list.d/pop-os-ppa.sources"
PREFERENCES = "/etc/apt/preferences.d/pop-default-settings"
FOCAL_POP_PPA = "/etc/apt/sources.list.d/system76-ubuntu-pop-focal.list"

OLD_RELEASES_DISTS = "http://old-releases.ubuntu.com/ubuntu/dists/"
OLD_RELEASES_MIRROR = "http://old-releases.ubuntu.com"
POP_PPA_MARKER = "system76-ubuntu-pop"

_ARCHIVE_RE = re.compile("http.*archive.ubuntu.com")

PREFERENCES_BIONIC = """Package: *
Pin: release o=LP-PPA-system76-pop
Pin-Priority: 1001

Package: *
Pin: release o=LP-PPA-system76-proposed
Pin-Priority: 1001
"""

PREFERENCES_IMPISH = """Package: *
Pin: release o=pop-os-release
Pin-Priority: 1001
"""

SOURCES_LIST_PLACEHOLDER = """## This file is deprecated in Pop!_OS.
## See `man deb822` and /etc/apt/sources.list.d/system.sources.
"""


def _system_sources(release: str) -> str:
    return f"""X-Repolib-Name: Pop_OS System Sources
Enabled: yes
Types: deb deb-src
URIs: http://us.archive.ubuntu.com/ubuntu/
Suites: {release} {release}-security {release}-updates {release}-backports
Components: main restricted universe multiverse
X-Repolib-Default-Mirror: http://us.archive.ubuntu.com/ubuntu/
"""


def _proprietary_sources(release: str) -> str:
    return f"""X-Repolib-Name: Pop_OS Apps
Enabled: yes
Types: deb
URIs: http://apt.pop-os.org/proprietary
Suites: {release}
Components: main
"""


def _release_sources(release: str) -> str:
    return f"""X-Repolib-Name: Pop_OS Release Sources
Enabled: yes
Types: deb deb-src
URIs: http://apt.pop-os.org/release
Suites: {release}
Components: main
"""


def _groovy_ppa(release: str) -> str:
    return f"""## This file was generated by pop-upgrade
#
## X-Repolib-Name: Pop_OS PPA
deb http://ppa.launchpad.net/system76/pop/ubuntu {release} main
deb-src http://ppa.launchpad.net/system76/pop/ubuntu {release} main
"""


def _sources_list_before_deb822(release: str) -> str:
    return f"""# Ubuntu Repositories

deb http://us.archive.ubuntu.com/ubuntu/ {release} restricted multiverse universe main
deb-src http://us.archive.ubuntu.com/ubuntu/ {release} restricted multiverse universe main

deb http://us.archive.ubuntu.com/ubuntu/ {release}-updates restricted multiverse universe main
deb-src http://us.archive.ubuntu.com/ubuntu/ {release}-updates restricted multiverse universe main

deb http://us.archive.ubuntu.com/ubuntu/ {release}-security restricted multiverse universe main
deb-src http://us.archive.ubuntu.com/ubuntu/ {release}-security restricted multiverse universe main

deb http://us.archive.ubuntu.com/ubuntu/ {release}-backports restricted multiverse universe main
deb-src http://us.archive.ubuntu.com/ubuntu/ {release}-backports restricted multiverse universe main

# Pop!_OS Repositories

deb http://ppa.launchpad.net/system76/pop/ubuntu {release} main
deb-src http://ppa.launchpad.net/system76/pop/ubuntu {release} main

deb http://apt.pop-os.org/proprietary {release} main
"""


def _remove_list() -> tuple[str, ...]:
    return (SYSTEM_SOURCES, PROPRIETARY_SOURCES, GROOVY_PPA, IMPISH_RELEASE)


def _list_dir(directory: "str | os.PathLike[str]") -> list[Path]:
    """Every entry of a directory, or nothing if it cannot be read."""
    try:
        with os.scandir(directory) as entries:
            return sorted(Path(entry.path) for entry in entries)
    except OSError:
        return []


def _remove_quietly(path: "str | os.PathLike[str]") -> None:
    try:
        os.remove(path)
    except OSError:
        pass


def iter_files(directory: "str | os.PathLike[str]") -> Iterator[Path]:
    """Yield the regular files directly inside ``directory``."""
    with os.scandir(directory) as entries:
        for entry in entries:
            try:
                is_file = entry.is_file(follow_symlinks=False)
            except OSError:
                continue
            if is_file:
                yield Path(entry.path)


def is_save_file(path: "str | os.PathLike[str]") -> bool:
    """Whether a path is a ``.save`` backup."""
    return Path(path).suffix == ".save"


def backup(release: str) -> None:
    """Back up the source lists, replacing older backups."""
    delete: list[Path] = []
    to_backup: list[Path] = []
    sources_missing = False

    sources = Path(SOURCES_LIST)
    if sources.exists():
        saved = Path(f"{SOURCES_LIST}.save")
        if saved.exists():
            delete.append(saved)
        to_backup.append(sources)
    else:
        sources_missing = True

    for path in _list_dir(PPA_DIR):
        if path.suffix == ".save":
            delete.append(path)
        elif path.suffix in (".sources", ".list"):
            to_backup.append(path)

    for path in delete:
        log.info("removing old backup at %s", path)
        try:
            os.remove(path)
        except OSError as why:
            raise OSError(f"failed to remove backup at {path}") from why

    for src in to_backup:
        dst = Path(f"{src}.save")
        log.info("creating backup of %s to %s", src, dst)
        try:
            shutil.copy(src, dst)
        except OSError as why:
            raise OSError(f"failed to copy {src} to {dst}") from why

    if sources_missing:
        log.info("sources list was not found — creating a new one")
        try:
            apply_default_source_lists(release)
        except OSError as why:
            raise OSError("failed to create new sources.list") from why


def _delete_system76_ubuntu_ppa_list() -> None:
    for path in _list_dir(PPA_DIR):
        if path.suffix == ".list" and POP_PPA_MARKER in path.name:
            _remove_quietly(path)


def disable_third_parties(release: str) -> None:
    """Comment out the ``deb`` lines of every ``.list`` file in the PPA directory."""
    _delete_system76_ubuntu_ppa_list()

    try:
        files = sorted(iter_files(PPA_DIR))
    except OSError as why:
        raise OSError("cannot read PPA directory") from why

    for path in files:
        if path.suffix != ".list":
            continue

        log.info("disabling sources in %s", path)
        try:
            contents = path.read_text()
        except (OSError, ValueError) as why:
            raise OSError(f"failed to read {path}") from why

        replaced = []
        for line in contents.splitlines():
            trimmed = line.strip()
            prefix = "# " if trimmed.startswith("deb") else ""
            replaced.append(f"{prefix}{trimmed}\n")

        try:
            path.write_text("".join(replaced))
        except OSError as why:
            raise OSError(f"failed to open {path} for writing") from why

    apply_default_source_lists(release)


def is_eol(codename: Codename) -> bool:
    """Whether an Ubuntu release has passed its end of life."""
    return EolDate.from_codename(codename).status() is EolStatus.EXCEEDED


def is_old_release(codename: str) -> bool:
    """Whether the release is published on Ubuntu's old-releases archive."""
    url = f"{OLD_RELEASES_DISTS}{codename}/Release"
    request = urllib.request.Request(url, method="HEAD")
    try:
        with urllib.request.urlopen(request, timeout=30) as response:
            return 200 <= response.status < 300
    except (OSError, ValueError):
        return False


def repair(release: str) -> None:
    """Reinstate the default source lists of a release."""
    apply_default_source_lists(release)


def replace_with_old_releases() -> None:
    """Point ``*.archive.ubuntu.com`` sources at old-releases.ubuntu.com."""
    for source in (SOURCES_LIST, SYSTEM_SOURCES):
        path = Path(source)
        try:
            contents = path.read_text()
        except (OSError, ValueError):
            continue
        changed, count = _ARCHIVE_RE.subn(OLD_RELEASES_MIRROR, contents)
        if count:
            try:
                path.write_text(changed)
            except OSError:
                pass


def restore(release: str) -> None:
    """Restore the previous backup of the source lists."""
    log.info("restoring release files for %s", release)

    try:
        log.info("checking for extra source files that should be removed.")
        has_saves = any(is_save_file(path) for path in iter_files(PPA_DIR))
    except OSError:
        has_saves = False

    if has_saves:
        log.info("found save files to restore")
        try:
            extras = [path for path in iter_files(PPA_DIR) if not is_save_file(path)]
        except OSError:
            extras = []
        for path in extras:
            log.info("removing %s", path)
            _remove_quietly(path)

    for file in _remove_list():
        _remove_quietly(file)
        _remove_quietly(f"{file}.save")

    files: list[Path] = []
    sources_saved = Path(f"{SOURCES_LIST}.save")
    if sources_saved.exists():
        files.append(sources_saved)
    files.extend(path for path in _list_dir(PPA_DIR) if path.suffix == ".save")

    for path in files:
        dst = Path(str(path)[: -len(".save")])
        log.info("restoring source list at %s", dst)

        if dst.exists():
            try:
                os.remove(dst)
            except OSError as why:
                log.error("failed to remove source list %s: %s", dst, why)

        try:
            os.rename(path, dst)
        except OSError as why:
            log.error("failed to rename (%s) to (%s): %s", path, dst, why)

    defaults_error: "OSError | None" = None
    try:
        apply_default_source_lists(release)
    except OSError as why:
        defaults_error = why

    preferences_error: "OSError | None" = None
    try:
        _update_preferences_script(release)
    except OSError as why:
        preferences_error = why

    if release == "focal":
        _remove_quietly(FOCAL_POP_PPA)

    if defaults_error is not None and preferences_error is not None:
        raise preferences_error


def apply_default_source_lists(release: str) -> None:
    """Write the default source lists and apt preferences for a release."""
    if release in ("bionic", "focal"):
        log.info("creating source repository files for bionic/focal")
        Path(SOURCES_LIST).write_text(_sources_list_before_deb822(release))
    elif release in ("groovy", "hirsute"):
        log.info("creating source repository files for groovy/hirsute")
        Path(SOURCES_LIST).write_text(SOURCES_LIST_PLACEHOLDER)
        Path(SYSTEM_SOURCES).write_text(_system_sources(release))
        Path(PROPRIETARY_SOURCES).write_text(_proprietary_sources(release))
        Path(GROOVY_PPA).write_text(_groovy_ppa(release))
        _delete_system76_ubuntu_ppa_list()
    else:
        log.info("creating source repository files for impish+")
        _remove_quietly(GROOVY_PPA)
        Path(SOURCES_LIST).write_text(SOURCES_LIST_PLACEHOLDER)
        Path(SYSTEM_SOURCES).write_text(_system_sources(release))
        Path(PROPRIETARY_SOURCES).write_text(_proprietary_sources(release))
        Path(IMPISH_RELEASE).write_text(_release_sources(release))
        _delete_system76_ubuntu_ppa_list()

    _update_preferences_script(release)

    if is_old_release(release):
        replace_with_old_releases()


def _update_preferences_script(release: str) -> None:
    data = PREFERENCES_BIONIC if release in ("bionic", "focal", "hirsute") else PREFERENCES_IMPISH
    try:
        Path(PREFERENCES).write_text(data)
    except OSError as why:
        raise OSError("failed to overwrite pop-default-settings apt preferences") from why