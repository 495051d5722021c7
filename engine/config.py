"""Lightweight loader for world configuration values."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

_ENV_KEY = "WORLD_CONFIG"
_DEFAULT_PATH = Path(__file__).resolve().parent.parent / "config" / "world.json"
_CONFIG_DATA: Dict[str, Any] = {}
_LOADED = False


def config_path() -> Path:
    override = os.environ.get(_ENV_KEY, "").strip()
    return Path(override) if override else _DEFAULT_PATH


def _read(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        print(f"[config] ignoring unreadable config {path}: {exc}")
        return {}
    if not isinstance(data, dict):
        print(f"[config] ignoring config {path}: top level must be an object")
        return {}
    return data


def _ensure_loaded() -> None:
    global _CONFIG_DATA, _LOADED
    if not _LOADED:
        _CONFIG_DATA = _read(config_path())
        _LOADED = True


def load(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """(Re)load the active config from ``path`` or the default location."""
    global _CONFIG_DATA, _LOADED
    _CONFIG_DATA = _read(Path(path) if path is not None else config_path())
    _LOADED = True
    return _CONFIG_DATA


def get(path: str, default: Any = None) -> Any:
    """Return a config value using dotted paths, or default when missing."""
    _ensure_loaded()
    if not path:
        return _CONFIG_DATA

    current: Any = _CONFIG_DATA
    for segment in path.split('.'):
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        else:
            return default
    return current
