"""Config file discovery and loading.

The walk-up finder locates frontline.toml the way git finds .git/.
``FRONTLINE_CONFIG`` and the ``--config`` CLI flag override discovery.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from frontline.config.models import FrontlineConfig

CONFIG_FILENAME = "frontline.toml"
CONFIG_ENV_VAR = "FRONTLINE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for frontline.toml.

    The ``FRONTLINE_CONFIG`` env var, when set, wins outright.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def load_config(path: Path | None = None, cwd: Path | None = None) -> FrontlineConfig:
    """Load and validate config from a TOML file.

    Without *path*, discovery starts at *cwd*. Returns defaults when no
    file is found.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return FrontlineConfig()

    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    return FrontlineConfig.model_validate(data)
