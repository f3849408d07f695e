"""Optional per-project build settings."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping

from core.config_loader import find_config_file, load_config_file, normalize_string_list

from .reporter import LEVELS


SETTINGS_STEM = "winbuilder"

_ALLOWED_KEYS = {
    "build": {"architectures", "log_level"},
    "toolchain": {"version", "path"},
    "project": {"platform_config_script", "preferences_file"},
}


def _check_keys(section: str, data: Mapping[str, Any]) -> None:
    allowed = _ALLOWED_KEYS[section]
    unknown = {str(key) for key in data.keys() if str(key) not in allowed}
    if unknown:
        joined = ", ".join(sorted(unknown))
        raise ValueError(f"Settings section '{section}' contains unknown keys: {joined}")


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, Mapping):
        raise TypeError(f"Settings section '{name}' must be a mapping")
    _check_keys(name, value)
    return value


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(slots=True)
class ToolchainPin:
    version: str
    path: str


@dataclass(slots=True)
class BuildSettings:
    architectures: List[str] = field(default_factory=list)
    log_level: str | None = None
    toolchain: ToolchainPin | None = None
    platform_config_script: str | None = None
    preferences_file: str = "config.xml"
    source: Path | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, source: Path | None = None) -> "BuildSettings":
        unknown = {str(key) for key in data.keys() if str(key) not in _ALLOWED_KEYS}
        if unknown:
            joined = ", ".join(sorted(unknown))
            raise ValueError(f"Settings contain unknown sections: {joined}")

        build = _section(data, "build")
        toolchain = _section(data, "toolchain")
        project = _section(data, "project")

        architectures = normalize_string_list(build.get("architectures"), field_name="build.architectures")

        log_level = _optional_str(build.get("log_level"))
        if log_level is not None and log_level.lower() not in LEVELS:
            raise ValueError(f"build.log_level must be one of: {', '.join(LEVELS)}")

        pin: ToolchainPin | None = None
        if toolchain:
            version = _optional_str(toolchain.get("version"))
            path = _optional_str(toolchain.get("path"))
            if not version or not path:
                raise ValueError("Settings section 'toolchain' requires both 'version' and 'path'")
            pin = ToolchainPin(version=version, path=path)

        return cls(
            architectures=architectures,
            log_level=log_level,
            toolchain=pin,
            platform_config_script=_optional_str(project.get("platform_config_script")),
            preferences_file=_optional_str(project.get("preferences_file")) or "config.xml",
            source=source,
        )


def load_settings(project_root: Path, explicit: Path | None = None) -> BuildSettings:
    """Load ``winbuilder.{toml,json,yaml,yml}`` from the project root, if present."""

    path = explicit
    if path is not None and not path.is_absolute():
        path = project_root / path
    if path is None:
        path = find_config_file(project_root, SETTINGS_STEM)
    if path is None:
        return BuildSettings()
    if not path.is_file():
        raise FileNotFoundError(f"Settings file not found: {path}")
    return BuildSettings.from_mapping(load_config_file(path), source=path)


__all__ = ["BuildSettings", "SETTINGS_STEM", "ToolchainPin", "load_settings"]
