"""Repairs of the /etc/crypttab file."""

from __future__ import annotations

import os
from pathlib import Path

CRYPTTAB = "/etc/crypttab"
CRYPTTAB_TMP = "/etc/crypttab.tmp"


def repair() -> None:
    """Add the ``plain`` option to swap entries that lack it."""
    path = Path(CRYPTTAB)
    if not path.exists():
        return

    try:
        contents = path.read_text()
    except (OSError, ValueError) as why:
        raise OSError("cannot read the crypttab file") from why

    new_contents = cryptswap_plain_warning(contents)
    if new_contents is None:
        return

    try:
        Path(CRYPTTAB_TMP).write_text(new_contents)
    except OSError as why:
        raise OSError("failed to write new crypttab") from why

    try:
        os.rename(CRYPTTAB_TMP, CRYPTTAB)
    except OSError as why:
        raise OSError("failed to overwrite crypttab") from why


def cryptswap_plain_warning(text: str) -> "str | None":
    """The corrected crypttab, or None if no swap entry needed ``plain``."""
    correction_needed = False
    lines = []

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            lines.append(line)
            continue

        fields = line.split()
        if len(fields) > 3:
            options = fields[3].split(",")
            if "swap" in options and "plain" not in options:
                lines.append(line.replace("swap,", "swap,plain,"))
                correction_needed = True
                continue

        lines.append(line)

    if not correction_needed:
        return None
    return "".join(f"{line}\n" for line in lines)