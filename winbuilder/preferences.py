"""Read declared preferences from the project's ``config.xml``."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping, Protocol
import xml.etree.ElementTree as ElementTree

from .errors import PreferenceFileError


STORE_TARGET_VERSION = "windows-target-version"
PHONE_TARGET_VERSION = "windows-phone-target-version"


class PreferenceSource(Protocol):
    def get(self, name: str) -> str | None:
        ...


class MappingPreferences:
    """Preferences held in memory; names match case-insensitively."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values: Dict[str, str] = {}
        for key, value in (values or {}).items():
            self._values[str(key).lower()] = str(value)

    def get(self, name: str) -> str | None:
        return self._values.get(name.lower())


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


class ConfigXmlPreferences(MappingPreferences):
    """Preferences declared as ``<preference name=".." value=".."/>`` in config.xml.

    The widget namespace is ignored. When a name is declared more than once the
    first declaration wins.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(self._parse(path))

    @staticmethod
    def _parse(path: Path) -> Dict[str, str]:
        try:
            tree = ElementTree.parse(path)
        except FileNotFoundError as exc:
            raise PreferenceFileError(f"Preference file not found: {path}") from exc
        except OSError as exc:
            raise PreferenceFileError(f"Could not read {path}: {exc}") from exc
        except ElementTree.ParseError as exc:
            raise PreferenceFileError(f"Could not parse {path}: {exc}") from exc

        values: Dict[str, str] = {}
        for element in tree.getroot().iter():
            if not isinstance(element.tag, str) or _local_name(element.tag) != "preference":
                continue
            name = element.get("name")
            value = element.get("value")
            if not name or value is None:
                continue
            values.setdefault(name.lower(), value)
        return values


__all__ = [
    "ConfigXmlPreferences",
    "MappingPreferences",
    "PHONE_TARGET_VERSION",
    "PreferenceSource",
    "STORE_TARGET_VERSION",
]
