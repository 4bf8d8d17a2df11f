#!/usr/bin/env python3
"""
config - Locate the runr config document.

Search order:
  1. explicit path (--config)
  2. $RUNR_CONFIG
  3. $XDG_CONFIG_HOME/runr/config.yml
  4. ~/.config/runr/config.yml
  5. platform default (%APPDATA% on Windows, Application Support on macOS)
  6. ./config.yml (legacy)

Explicit paths (1, 2) are returned whether or not they exist; the rest only
count when the file is there.
"""

import os
import sys
from pathlib import Path
from typing import List, Optional

APP_NAME = "runr"
CONFIG_FILENAME = "config.yml"
ENV_VAR = "RUNR_CONFIG"
LEGACY_PATH = Path(CONFIG_FILENAME)


def get_platform_config_dir() -> Path:
    """Get the OS-native configuration directory for runr."""
    if sys.platform.startswith("win"):
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
        return root / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    return Path.home() / ".config" / APP_NAME


def candidate_paths() -> List[Path]:
    """Standard locations, in search order, without duplicates."""
    paths = []
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        paths.append(Path(xdg) / APP_NAME / CONFIG_FILENAME)
    paths.append(Path.home() / ".config" / APP_NAME / CONFIG_FILENAME)
    paths.append(get_platform_config_dir() / CONFIG_FILENAME)
    paths.append(LEGACY_PATH)

    unique = []
    for p in paths:
        if p not in unique:
            unique.append(p)
    return unique


def resolve_config_path(override: Optional[str] = None) -> Path:
    """Return the config file runr should load."""
    if override:
        return Path(override).expanduser()
    env_path = os.environ.get(ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    for p in candidate_paths():
        if p.exists():
            return p
    return LEGACY_PATH
