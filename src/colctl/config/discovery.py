"""Locate colctl.toml.

``COLCTL_CONFIG`` names the file explicitly; otherwise the directory tree is
searched upward from the working directory, the way git finds ``.git/``.
The file itself is read by :class:`colctl.config.settings.TomlSettingsSource`.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "colctl.toml"
CONFIG_ENV_VAR = "COLCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file to load, or None if there is none.

    An explicit ``COLCTL_CONFIG`` that names a missing file yields None
    rather than falling back to the walk-up search.
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit)
        return path if path.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
