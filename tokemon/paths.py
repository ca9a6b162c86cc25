"""Locations of tokemon's own directories and of editor data directories."""

from __future__ import annotations

import sys
from pathlib import Path

import platformdirs

_APP_NAME = "tokemon"

# VS Code compatible editors that keep extension data in globalStorage.
VSCODE_FORKS = (
    "Code",
    "Code - Insiders",
    "Cursor",
    "Windsurf",
    "VSCodium",
    "Positron",
)


def home_dir() -> Path:
    """The user's home directory, or the current directory when it is unknown."""
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        print("[tokemon] Warning: could not determine home directory", file=sys.stderr)
        return Path(".")


def cache_dir() -> Path:
    """Directory that holds the usage cache database."""
    return Path(platformdirs.user_cache_dir(_APP_NAME, appauthor=False, opinion=False))


def config_dir() -> Path:
    """Directory that holds ``config.toml``."""
    return Path(platformdirs.user_config_dir(_APP_NAME, appauthor=False))


def vscode_global_storage_dirs() -> list[Path]:
    """Existing ``User/globalStorage`` directories of known VS Code forks."""
    if sys.platform == "darwin":
        base = home_dir() / "Library" / "Application Support"
    elif sys.platform.startswith("linux"):
        base = home_dir() / ".config"
    else:
        base = Path(platformdirs.user_data_dir(roaming=True))

    candidates = (base / fork / "User" / "globalStorage" for fork in VSCODE_FORKS)
    return [path for path in candidates if path.exists()]