"""Settings management for moduledev.

Scope-aware YAML settings, merged in priority order (most specific wins):
1. local (.moduledev/settings.local.yaml) - gitignored, machine-specific
2. project (.moduledev/settings.yaml) - committed, team-shared
3. global (~/.moduledev/settings.yaml) - user defaults

Recognized keys: niagara_home, moduledev_file, retain_temp, temp_parent,
log_level, log_path.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Literal

import yaml

from .config import ResolverConfig

logger = logging.getLogger(__name__)

Scope = Literal["local", "project", "global"]

KEEP_TEMP_ENV = "MODULEDEV_KEEP_TEMP"

SETTINGS_KEYS = ("niagara_home", "moduledev_file", "retain_temp", "temp_parent", "log_level", "log_path")


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path | None
    local_settings: Path | None

    @classmethod
    def default(cls) -> SettingsPaths:
        """Create default paths.

        When running from the home directory, project and local scopes are
        disabled so ~/.moduledev only ever holds the global file.
        """
        home = Path.home()
        cwd = Path.cwd()
        if cwd == home:
            return cls(global_settings=home / ".moduledev" / "settings.yaml", project_settings=None, local_settings=None)
        return cls(
            global_settings=home / ".moduledev" / "settings.yaml",
            project_settings=cwd / ".moduledev" / "settings.yaml",
            local_settings=cwd / ".moduledev" / "settings.local.yaml",
        )


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


class ModuleDevSettings:
    """Settings manager with scope-aware merging.

    Usage:
        settings = ModuleDevSettings()
        config = settings.resolver_config(niagara_home=cli_option)
        settings.set_value("niagara_home", "/opt/niagara", scope="global")
    """

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge settings from all scopes."""
        result: dict[str, Any] = {}
        for scope in ("global", "project", "local"):
            result.update(self._read_scope(scope))
        return result

    def get(self, key: str, default: Any = None) -> Any:
        return self.get_merged_settings().get(key, default)

    def set_value(self, key: str, value: Any, scope: Scope = "global") -> None:
        """Set a single setting at the specified scope."""
        if key not in SETTINGS_KEYS:
            raise ValueError(f"Unknown setting '{key}'. Valid keys: {', '.join(SETTINGS_KEYS)}")
        settings = self._read_scope(scope)
        settings[key] = value
        self._write_scope(scope, settings)

    def resolver_config(self, **overrides: Any) -> ResolverConfig:
        """Build a ResolverConfig from merged settings.

        Overrides that are None are ignored, so CLI options that were not
        given leave the settings value in place.
        """
        settings = self.get_merged_settings()
        values = {key: settings[key] for key in ResolverConfig.model_fields if settings.get(key) is not None}
        if _env_flag(KEEP_TEMP_ENV):
            values["retain_temp"] = True
        values.update({key: value for key, value in overrides.items() if value is not None})
        return ResolverConfig.model_validate(values)

    # ----- Scope utilities -----

    def _get_scope_path(self, scope: Scope) -> Path | None:
        return {
            "local": self.paths.local_settings,
            "project": self.paths.project_settings,
            "global": self.paths.global_settings,
        }[scope]

    def _read_scope(self, scope: Scope) -> dict[str, Any]:
        path = self._get_scope_path(scope)
        if path is None or not path.exists():
            return {}
        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.debug(f"Skipping malformed settings file {path}: {e}")
            return {}
        if not isinstance(content, dict):
            logger.debug(f"Skipping settings file {path}: not a mapping")
            return {}
        return content

    def _write_scope(self, scope: Scope, settings: dict[str, Any]) -> None:
        path = self._get_scope_path(scope)
        if path is None:
            raise ValueError(f"Scope '{scope}' is not available when running from the home directory")
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(settings, f, default_flow_style=False)
