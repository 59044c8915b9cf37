"""Configuration manager with layered precedence merging."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values

from promptlib_cli.models import LintSettings

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDES = [".git", "node_modules", "__pycache__", ".venv", "venv"]


def _package_config_dir() -> Path:
    """Return the config/ directory shipped with the package."""
    return Path(__file__).resolve().parent.parent.parent / "config"


def _user_config_dir() -> Path:
    """Return ~/.promptlib/."""
    return Path.home() / ".promptlib"


def _project_config_dir() -> Path:
    """Return .promptlib/ in the current working directory."""
    return Path.cwd() / ".promptlib"


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found."""
    if path.is_file():
        with open(path) as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    return {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = dict(base)
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


ENV_MAP: dict[str, str] = {
    "PROMPTLIB_ROOT": "root",
    "PROMPTLIB_STRICT": "strict",
    "PROMPTLIB_LOG_LEVEL": "log_level",
    "PROMPTLIB_WARN_UNKNOWN_MARKDOWN": "warn_unknown_markdown",
}

BOOL_KEYS = frozenset({"strict", "warn_unknown_markdown"})

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def _parse_bool(value: Any) -> bool:
    """Interpret a YAML or environment value as a boolean.

    Raises ValueError for anything that is not a recognised spelling.
    """
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _as_bool(value: Any, key: str, default: bool) -> bool:
    try:
        return _parse_bool(value)
    except ValueError as e:
        logger.warning("Ignoring %s: %s", key, e)
        return default


class ConfigManager:
    """Loads and merges configuration from multiple sources.

    Precedence (highest first):
      1. CLI overrides (set via set_override)
      2. Environment variables (PROMPTLIB_*), then .promptlib/.env
      3. Custom config path (--config)
      4. Project config: .promptlib/settings.yaml
      5. User config: ~/.promptlib/settings.yaml
      6. Package defaults: config/settings.yaml
    """

    def __init__(
        self,
        *,
        config_path: str | None = None,
        cli_overrides: dict[str, Any] | None = None,
    ) -> None:
        self._cli_overrides = cli_overrides or {}
        self._config_path = Path(config_path) if config_path else None
        self._merged: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        """Load and merge all config sources."""
        merged = _load_yaml(_package_config_dir() / "settings.yaml")
        merged = _deep_merge(merged, _load_yaml(_user_config_dir() / "settings.yaml"))
        merged = _deep_merge(
            merged, _load_yaml(_project_config_dir() / "settings.yaml")
        )

        if self._config_path:
            merged = _deep_merge(merged, _load_yaml(self._config_path))

        # Real environment wins over the project's .env file
        env_file = _project_config_dir() / ".env"
        file_values = dotenv_values(env_file) if env_file.is_file() else {}
        for env_key, config_key in ENV_MAP.items():
            val = os.environ.get(env_key, file_values.get(env_key))
            if val is None:
                continue
            if config_key in BOOL_KEYS:
                try:
                    merged[config_key] = _parse_bool(val)
                except ValueError as e:
                    logger.warning("Ignoring %s: %s", env_key, e)
            else:
                merged[config_key] = val

        merged = _deep_merge(merged, self._cli_overrides)
        self._merged = merged

    def set_override(self, key: str, value: Any) -> None:
        """Set a CLI-level override."""
        self._cli_overrides[key] = value
        self._load()

    @property
    def settings(self) -> LintSettings:
        """Build LintSettings from merged config."""
        required_raw = self._merged.get("required_fields") or {}
        required: dict[str, list[str]] = {}
        if isinstance(required_raw, dict):
            for kind, fields in required_raw.items():
                if isinstance(fields, list):
                    required[str(kind)] = [str(f) for f in fields]

        return LintSettings(
            root=str(self._merged.get("root", ".")),
            exclude_patterns=list(
                self._merged.get("exclude_patterns", DEFAULT_EXCLUDES)
            ),
            required_fields=required,
            content_dirs=list(
                self._merged.get("content_dirs", ["prompts", "instructions", "agents"])
            ),
            strict=_as_bool(self._merged.get("strict", False), "strict", False),
            warn_unknown_markdown=_as_bool(
                self._merged.get("warn_unknown_markdown", True),
                "warn_unknown_markdown",
                True,
            ),
            log_level=str(self._merged.get("log_level", "WARNING")).upper(),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by key."""
        return self._merged.get(key, default)

    @property
    def raw(self) -> dict[str, Any]:
        """Return the raw merged config dict."""
        return dict(self._merged)
