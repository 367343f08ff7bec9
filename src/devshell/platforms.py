# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Platform enumeration and the per-platform expansion helper."""

from __future__ import annotations

import platform as _platform
import sys
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final, Protocol, TypeVar

from .errors import ConfigurationError
from .types import PlatformId

T = TypeVar("T")

DEFAULT_SYSTEMS: Final[tuple[PlatformId, ...]] = (
    "aarch64-linux",
    "aarch64-darwin",
    "x86_64-darwin",
    "x86_64-linux",
)

_MACHINE_ALIASES: Final[dict[str, str]] = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
    "armv8l": "aarch64",
    "i386": "i686",
}


class PlatformEnumerator(Protocol):
    """Supply the fixed set of platforms an environment is declared for."""

    def enumerate(self) -> frozenset[PlatformId]:
        """Return the supported platform identifiers."""
        ...


@dataclass(frozen=True, slots=True)
class StaticPlatforms:
    """Platform enumerator backed by an explicit list of identifiers."""

    systems: tuple[PlatformId, ...] = DEFAULT_SYSTEMS

    def __post_init__(self) -> None:
        systems = tuple(self.systems)
        if any(not isinstance(system, str) or not system.strip() for system in systems):
            raise ConfigurationError("platform identifiers must be non-empty strings")
        if len(set(systems)) != len(systems):
            raise ConfigurationError("platform identifiers must be unique")
        object.__setattr__(self, "systems", systems)

    def enumerate(self) -> frozenset[PlatformId]:
        return frozenset(self.systems)


def host_platform() -> PlatformId:
    """Return the platform identifier describing the running interpreter's host."""

    machine = _platform.machine().lower() or "unknown"
    machine = _MACHINE_ALIASES.get(machine, machine)
    if sys.platform.startswith("linux"):
        kernel = "linux"
    elif sys.platform == "darwin":
        kernel = "darwin"
    elif sys.platform.startswith("freebsd"):
        kernel = "freebsd"
    else:
        kernel = sys.platform.lower()
    return f"{machine}-{kernel}"


def for_each_platform(
    platforms: Iterable[PlatformId],
    evaluate: Callable[[PlatformId], T],
    *,
    jobs: int = 1,
) -> Mapping[PlatformId, T]:
    """Map ``evaluate`` over ``platforms`` and return an immutable result mapping.

    Each platform is evaluated exactly once. ``evaluate`` must not share mutable
    state across calls, which is what makes ``jobs > 1`` safe.

    Args:
        platforms: Platform identifiers to expand over.
        evaluate: Pure function producing the value for a single platform.
        jobs: Maximum number of platforms evaluated concurrently.

    Returns:
        Mapping[PlatformId, T]: Read-only mapping keyed by platform, sorted by identifier.
    """

    if jobs < 1:
        raise ValueError("jobs must be at least 1")
    ordered = sorted(set(platforms))
    if jobs == 1 or len(ordered) <= 1:
        results = [evaluate(platform) for platform in ordered]
    else:
        with ThreadPoolExecutor(max_workers=min(jobs, len(ordered))) as executor:
            results = list(executor.map(evaluate, ordered))
    return MappingProxyType(dict(zip(ordered, results, strict=True)))


__all__ = [
    "DEFAULT_SYSTEMS",
    "PlatformEnumerator",
    "StaticPlatforms",
    "for_each_platform",
    "host_platform",
]
