"""Build flag validation."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from .errors import ConflictingOptions


DEFAULT_ARCHITECTURES: Tuple[str, ...] = ("anycpu",)


class BuildType(str, Enum):
    DEBUG = "debug"
    RELEASE = "release"


class PlatformScope(str, Enum):
    PHONE = "phone"
    STORE = "store"
    BOTH = "both"

    @property
    def includes_store(self) -> bool:
        return self in (PlatformScope.STORE, PlatformScope.BOTH)

    @property
    def includes_phone(self) -> bool:
        return self in (PlatformScope.PHONE, PlatformScope.BOTH)


@dataclass(frozen=True, slots=True)
class BuildRequest:
    build_type: BuildType = BuildType.DEBUG
    scope: PlatformScope = PlatformScope.BOTH
    architectures: Tuple[str, ...] = DEFAULT_ARCHITECTURES
    dry_run: bool = False
    ignored_arguments: Tuple[str, ...] = field(default=())


def split_architectures(values: Iterable[str] | None) -> List[str]:
    """Split ``--archs`` values on whitespace, keeping order and duplicates."""

    architectures: List[str] = []
    for value in values or []:
        if value:
            architectures.extend(value.split())
    return architectures


def build_request(
    *,
    debug: bool = False,
    release: bool = False,
    phone: bool = False,
    store: bool = False,
    archs: Sequence[str] | None = None,
    default_architectures: Sequence[str] | None = None,
    dry_run: bool = False,
    ignored_arguments: Sequence[str] = (),
) -> BuildRequest:
    """Validate parsed flags and apply defaults.

    Raises :class:`ConflictingOptions` when both build types or both platform
    scopes are requested. Architecture tokens are not validated; MSBuild
    rejects unknown platforms itself.
    """

    if debug and release:
        raise ConflictingOptions('Only one of "debug"/"release" options should be specified')
    if phone and store:
        raise ConflictingOptions('Only one of "phone"/"store" options should be specified')

    build_type = BuildType.RELEASE if release else BuildType.DEBUG
    if phone:
        scope = PlatformScope.PHONE
    elif store:
        scope = PlatformScope.STORE
    else:
        scope = PlatformScope.BOTH

    architectures = split_architectures(archs)
    if not architectures:
        architectures = list(default_architectures or DEFAULT_ARCHITECTURES)

    return BuildRequest(
        build_type=build_type,
        scope=scope,
        architectures=tuple(architectures),
        dry_run=dry_run,
        ignored_arguments=tuple(ignored_arguments),
    )


__all__ = [
    "BuildRequest",
    "BuildType",
    "DEFAULT_ARCHITECTURES",
    "PlatformScope",
    "build_request",
    "split_architectures",
]
