"""File modification times in whole seconds, aware of SQLite WAL siblings."""

from __future__ import annotations

import os
from pathlib import Path

_NS_PER_SEC = 1_000_000_000


def file_mtime_secs(path: str | os.PathLike[str]) -> int | None:
    """Modification time in whole seconds since the epoch.

    Returns ``None`` when the file cannot be read or its time lies before
    the epoch.
    """
    try:
        mtime_ns = os.stat(path).st_mtime_ns
    except OSError:
        return None
    if mtime_ns < 0:
        return None
    return mtime_ns // _NS_PER_SEC


def file_mtime_secs_for_db(path: str | os.PathLike[str]) -> int | None:
    """Modification time, taking SQLite ``-wal`` and ``-shm`` siblings into account.

    For ``.db`` files the latest mtime of the database and its siblings is
    returned, since WAL-mode writes land in the ``-wal`` file before a
    checkpoint touches the main file. Other files are handled like
    :func:`file_mtime_secs`. Returns ``None`` when the main file is missing.
    """
    base = file_mtime_secs(path)
    if base is None:
        return None

    if Path(path).suffix != ".db":
        return base

    path_str = os.fspath(path)
    wal = file_mtime_secs(f"{path_str}-wal") or 0
    shm = file_mtime_secs(f"{path_str}-shm") or 0
    return max(base, wal, shm)