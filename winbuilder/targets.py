"""Build targets and their resolution from declared platform preferences."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from .errors import UnsupportedTargetVersion
from .options import PlatformScope
from .preferences import PHONE_TARGET_VERSION, STORE_TARGET_VERSION, PreferenceSource
from .reporter import Reporter
from .toolchain import ToolchainCapability


class TargetId(str, Enum):
    PHONE = "phone"
    STORE = "store"
    LEGACY_STORE = "legacy-store"
    LEGACY_SOLUTION = "legacy-solution"


@dataclass(frozen=True, slots=True)
class TargetSpec:
    identifier: TargetId
    project_file: str
    platform: str
    legacy_toolchain_supported: bool


PHONE_TARGET = TargetSpec(TargetId.PHONE, "CordovaApp.Phone.jsproj", "phone", False)
STORE_TARGET = TargetSpec(TargetId.STORE, "CordovaApp.Store.jsproj", "store", False)
LEGACY_STORE_TARGET = TargetSpec(TargetId.LEGACY_STORE, "CordovaApp.Store80.jsproj", "store", True)
LEGACY_SOLUTION_TARGET = TargetSpec(TargetId.LEGACY_SOLUTION, "CordovaApp.vs2012.sln", "store", True)


class StoreTargetVersion(Enum):
    WINDOWS_80 = "8.0"
    WINDOWS_81 = "8.1"

    @classmethod
    def parse(cls, value: str | None) -> "StoreTargetVersion":
        version = _STORE_VERSIONS.get(value) if value is not None else None
        if version is None:
            raise UnsupportedTargetVersion(STORE_TARGET_VERSION, value)
        return version

    @property
    def target(self) -> TargetSpec:
        if self is StoreTargetVersion.WINDOWS_80:
            return LEGACY_STORE_TARGET
        return STORE_TARGET


class PhoneTargetVersion(Enum):
    WINDOWS_PHONE_81 = "8.1"

    @classmethod
    def parse(cls, value: str | None) -> "PhoneTargetVersion":
        version = _PHONE_VERSIONS.get(value) if value is not None else None
        if version is None:
            raise UnsupportedTargetVersion(PHONE_TARGET_VERSION, value)
        return version

    @property
    def target(self) -> TargetSpec:
        return PHONE_TARGET


_STORE_VERSIONS: Dict[str, StoreTargetVersion] = {
    "8": StoreTargetVersion.WINDOWS_80,
    "8.0": StoreTargetVersion.WINDOWS_80,
    "8.1": StoreTargetVersion.WINDOWS_81,
}

_PHONE_VERSIONS: Dict[str, PhoneTargetVersion] = {
    "8.1": PhoneTargetVersion.WINDOWS_PHONE_81,
}


@dataclass(frozen=True, slots=True)
class DegradedTargetSet:
    """Targets dropped because the installed toolchain cannot build them."""

    skipped: Tuple[TargetSpec, ...]
    toolchain_version: str

    @property
    def message(self) -> str:
        return (
            "Windows 8.1 and Windows Phone 8.1 target platforms are not supported on this development "
            "machine and will be skipped. Please install OS Windows 8.1 and Visual Studio 2013 Update2 "
            "in order to build for Windows 8.1 and Windows Phone 8.1. "
            f"Skipped: {', '.join(target.project_file for target in self.skipped)}"
        )


class TargetResolver:
    """Maps a platform scope and declared target versions to build targets.

    Store targets always precede phone targets; the executor builds in this
    order. On the legacy toolchain the 8.1 targets are dropped with a warning
    and recorded in :attr:`degraded`.
    """

    def __init__(
        self,
        *,
        preferences: PreferenceSource,
        toolchain: ToolchainCapability,
        reporter: Reporter,
    ) -> None:
        self._preferences = preferences
        self._toolchain = toolchain
        self._reporter = reporter
        self.degraded: DegradedTargetSet | None = None

    def declared_targets(self, scope: PlatformScope) -> List[TargetSpec]:
        targets: List[TargetSpec] = []
        if scope.includes_store:
            store_version = StoreTargetVersion.parse(self._preferences.get(STORE_TARGET_VERSION))
            targets.append(store_version.target)
        if scope.includes_phone:
            phone_version = PhoneTargetVersion.parse(self._preferences.get(PHONE_TARGET_VERSION))
            targets.append(phone_version.target)
        return targets

    def filter_supported(self, targets: List[TargetSpec]) -> List[TargetSpec]:
        self.degraded = None
        if not targets:
            self._reporter.warning("No build targets are specified.")
            return []

        if not self._toolchain.is_legacy:
            return list(targets)

        supported = [target for target in targets if target.legacy_toolchain_supported]
        skipped = tuple(target for target in targets if not target.legacy_toolchain_supported)
        if skipped:
            self.degraded = DegradedTargetSet(skipped=skipped, toolchain_version=self._toolchain.version)
            self._reporter.warning(self.degraded.message)
        return supported

    def resolve(self, scope: PlatformScope) -> List[TargetSpec]:
        return self.filter_supported(self.declared_targets(scope))


__all__ = [
    "DegradedTargetSet",
    "LEGACY_SOLUTION_TARGET",
    "LEGACY_STORE_TARGET",
    "PHONE_TARGET",
    "PhoneTargetVersion",
    "STORE_TARGET",
    "StoreTargetVersion",
    "TargetId",
    "TargetResolver",
    "TargetSpec",
]
