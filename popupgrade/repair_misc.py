"""Miscellaneous pre-upgrade repairs."""

from __future__ import annotations

import pwd
import re
import shutil
from pathlib import Path

LIB_MODULES_DIRS = ("/lib/modules", "/usr/lib/modules")
UNAFFECTED = "5.3.0"
BADFLAGS = (" -mindirect-branch=thunk-extern", " -mindirect-branch=thunk-inline")

_CHUNK_RE = re.compile(r"\d+|\D+")


def human_compare(a: str, b: str) -> int:
    """Compare strings with embedded numbers by value: negative, zero or positive."""
    left = _CHUNK_RE.findall(a)
    right = _CHUNK_RE.findall(b)
    for x, y in zip(left, right):
        if x.isdigit() and y.isdigit():
            if int(x) != int(y):
                return -1 if int(x) < int(y) else 1
        elif x != y:
            return -1 if x < y else 1
    return (len(left) > len(right)) - (len(left) < len(right))


def dkms_gcc9_fix() -> None:
    """Strip flags that GCC 9 rejects from the Makefiles of kernels older than 5.3."""
    lib_modules = next((Path(p) for p in LIB_MODULES_DIRS if Path(p).exists()), None)
    if lib_modules is None:
        raise FileNotFoundError("A path to the /lib/modules directory does not exist")

    for entry in sorted(lib_modules.iterdir()):
        if human_compare(entry.name, UNAFFECTED) >= 0:
            continue
        makefile = entry / "build" / "Makefile"
        if not makefile.exists():
            continue
        data = makefile.read_text()
        for flag in BADFLAGS:
            data = data.replace(flag, "")
        makefile.write_text(data)


def wipe_pulse() -> None:
    """Remove the pulseaudio settings directory of every user."""
    for user in pwd.getpwall():
        path = Path(user.pw_dir) / ".config" / "pulse"
        if path.exists():
            shutil.rmtree(path)