"""Configuration manager for Photo Tagger."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml
from appdirs import user_config_dir


DEFAULT_CONFIG: dict[str, Any] = {
    "tags": {
        "auto_save": False,
        "hotkeys": {},
    },
    "slideshow": {
        "interval": 3.0,
        "loop": True,
    },
    "logging": {
        "level": "INFO",
        "log_to_file": False,
        "log_file": "photo_tagger.log",
    },
}

MIN_SLIDESHOW_INTERVAL = 0.5
MAX_SLIDESHOW_INTERVAL = 60.0


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def default_config_path() -> Path:
    """Return <user config dir>/photo_tagger/config.yaml."""
    return Path(user_config_dir("photo_tagger")) / "config.yaml"


class ConfigManager:
    """Tagger settings: built-in defaults overlaid with the user's YAML."""

    def __init__(self, config_path: str | Path | None = None):
        self._path = Path(config_path) if config_path else None
        self._config: dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        if self._path and self._path.exists():
            self.load()

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def config(self) -> dict[str, Any]:
        return self._config

    def _target_path(self, config_path: str | Path | None) -> Path:
        path = Path(config_path) if config_path else self._path
        if path is None:
            raise ValueError("No config path specified")
        self._path = path
        return path

    def load(self, config_path: str | Path | None = None) -> None:
        """Replace current settings with defaults plus the file's overrides."""
        path = self._target_path(config_path)
        self._config = _deep_merge(DEFAULT_CONFIG, _read_yaml(path))

    def save(self, config_path: str | Path | None = None) -> None:
        """Write every setting, defaults included, creating parent dirs."""
        path = self._target_path(config_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self._config, f, default_flow_style=False, sort_keys=False)

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Look up e.g. 'tags.hotkeys'; default if any segment is missing."""
        node: Any = self._config
        for part in dotted_key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, dotted_key: str, value: Any) -> None:
        """Store value at e.g. 'slideshow.interval', replacing non-dict parents."""
        *parents, leaf = dotted_key.split(".")
        node = self._config
        for part in parents:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        node[leaf] = value

    def load_layered(
        self,
        user_config_path: str | Path | None = None,
        settings_path: str | Path | None = None,
    ) -> None:
        """Load config with layered priority: DEFAULT <- user config <- settings.

        Creates user_config_path with defaults if it doesn't exist. A
        ``tags.hotkeys`` table in the settings file replaces the user's
        table instead of merging into it.
        """
        self._config = copy.deepcopy(DEFAULT_CONFIG)

        if user_config_path:
            user_config_path = Path(user_config_path)
            self._path = user_config_path
            if user_config_path.exists():
                self._config = _deep_merge(self._config, _read_yaml(user_config_path))
            else:
                self.save(user_config_path)

        if settings_path:
            settings_path = Path(settings_path)
            if settings_path.exists():
                settings = _read_yaml(settings_path)
                self._config = _deep_merge(self._config, settings)
                tag_settings = settings.get("tags")
                hotkeys = tag_settings.get("hotkeys") if isinstance(tag_settings, dict) else None
                if isinstance(hotkeys, dict):
                    self._config["tags"]["hotkeys"] = copy.deepcopy(hotkeys)

    def reset(self) -> None:
        """Reset config to defaults."""
        self._config = copy.deepcopy(DEFAULT_CONFIG)

    @property
    def auto_save(self) -> bool:
        return bool(self.get("tags.auto_save", False))

    @property
    def slideshow_interval(self) -> float:
        """Seconds per slide, clamped to 0.5-60."""
        try:
            interval = float(self.get("slideshow.interval", 3.0))
        except (TypeError, ValueError):
            interval = DEFAULT_CONFIG["slideshow"]["interval"]
        return max(MIN_SLIDESHOW_INTERVAL, min(interval, MAX_SLIDESHOW_INTERVAL))

    @property
    def slideshow_loop(self) -> bool:
        return bool(self.get("slideshow.loop", True))

    @property
    def hotkey_tags(self) -> dict[str, str]:
        hotkeys = self.get("tags.hotkeys", {})
        if not isinstance(hotkeys, dict):
            return {}
        return {
            str(key): value
            for key, value in hotkeys.items()
            if isinstance(value, str)
        }
