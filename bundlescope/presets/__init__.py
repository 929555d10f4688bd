from __future__ import annotations
import copy
from pathlib import Path
import yaml

from bundlescope.core.errors import SettingsError

DEFAULT_SETTINGS_PATH = Path("presets/settings.yaml")

DEFAULT_SETTINGS = {
    "ingest": {
        "extensions": [".js", ".json", ".map"],
        "max_total_bytes": 50 * 1024 * 1024,
        "exclude": [],
    },
    "report": {"top_modules": 10},
}

def _merge(base: dict, override: dict) -> dict:
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out

def load_settings(settings_path: Path | None) -> dict:
    p = settings_path or DEFAULT_SETTINGS_PATH
    if not p.exists():
        return copy.deepcopy(DEFAULT_SETTINGS)
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise SettingsError(f"Could not read settings from {p}: {e}") from e
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {p} must contain a mapping")
    return _merge(DEFAULT_SETTINGS, data)

def save_settings(settings: dict, settings_path: Path | None) -> Path:
    p = settings_path or DEFAULT_SETTINGS_PATH
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(yaml.safe_dump(settings, sort_keys=False), encoding="utf-8")
    return p
