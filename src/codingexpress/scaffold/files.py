"""File-system primitives shared by every generator.

Every generated file goes through :func:`create_file_if_absent`: an existing
file is reported as skipped and never modified, so re-running any command is
safe. Writes are atomic (temp file + :func:`os.replace`), so an interrupted
run never leaves a half-written file behind.
"""

from __future__ import annotations

import enum
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional

from codingexpress.output import get_output

logger = logging.getLogger(__name__)


class WriteOutcome(str, enum.Enum):
    CREATED = "created"
    SKIPPED = "skipped"


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def create_file_if_absent(root: Path, relative: str, contents: str) -> WriteOutcome:
    """Write *contents* to ``root / relative`` unless the file already exists.

    Reports ``Created file: <relative>`` or
    ``Skipped: <relative> (already exists)``.
    """
    target = root / relative
    if target.exists():
        get_output().info(f"Skipped: {relative} (already exists)")
        return WriteOutcome.SKIPPED
    atomic_write(target, contents)
    get_output().info(f"Created file: {relative}")
    logger.debug("Wrote %d bytes to %s", len(contents), target)
    return WriteOutcome.CREATED


def ensure_directories(root: Path, directories: Iterable[str]) -> None:
    for directory in directories:
        (root / directory).mkdir(parents=True, exist_ok=True)


def append_unless_present(path: Path, marker: str, block: str) -> bool:
    """Append *block* to *path* unless a line already starts with *marker*.

    Returns ``True`` when the file was changed.
    """
    existing = path.read_text(encoding="utf-8") if path.exists() else ""
    if any(line.startswith(marker) for line in existing.splitlines()):
        return False
    if existing and not existing.endswith("\n"):
        existing += "\n"
    atomic_write(path, existing + block)
    return True
