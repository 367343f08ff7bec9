# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Overlays and their left-to-right composition over package repositories."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from .errors import OverlayEvaluationError, ResolutionError
from .repository import PackageHandle, PackageRepository, RepositorySnapshot
from .types import PlatformId

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class Overlay(Protocol):
    """Transformation from a base repository to an augmented one."""

    @property
    def name(self) -> str:
        """Return a label identifying the overlay in error messages."""
        ...

    def __call__(self, repository: PackageRepository, platform: PlatformId) -> PackageRepository:
        """Return ``repository`` augmented with this overlay's definitions."""
        ...


@dataclass(frozen=True, slots=True)
class PackageDefinition:
    """Platform-independent description of a package contributed by an overlay."""

    version: str
    binaries: tuple[str, ...] = ()

    def materialise(self, name: str, platform: PlatformId, *, origin: str) -> PackageHandle:
        return PackageHandle(
            name=name,
            version=self.version,
            platform=platform,
            binaries=tuple(self.binaries),
            origin=origin,
        )


@dataclass(frozen=True, slots=True)
class PackageOverlay:
    """Overlay adding (or shadowing) a fixed set of package definitions."""

    name: str
    definitions: Mapping[str, PackageDefinition] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "definitions", MappingProxyType(dict(self.definitions)))

    def __call__(self, repository: PackageRepository, platform: PlatformId) -> PackageRepository:
        return repository.with_packages(
            definition.materialise(package_name, platform, origin=self.name)
            for package_name, definition in self.definitions.items()
        )


@dataclass(frozen=True, slots=True)
class FunctionOverlay:
    """Overlay backed by an arbitrary ``(repository, platform) -> repository`` callable."""

    name: str
    function: Callable[[PackageRepository, PlatformId], PackageRepository]

    def __call__(self, repository: PackageRepository, platform: PlatformId) -> PackageRepository:
        return self.function(repository, platform)


@dataclass(frozen=True, slots=True)
class SnapshotOverlay:
    """Overlay exported by a resolved source.

    Applying it layers the snapshot's packages and toolchain providers for the
    requested platform on top of the incoming repository.
    """

    snapshot: RepositorySnapshot

    @property
    def name(self) -> str:
        return self.snapshot.name

    def __call__(self, repository: PackageRepository, platform: PlatformId) -> PackageRepository:
        if not self.snapshot.supports(platform):
            raise OverlayEvaluationError(
                self.name,
                platform,
                f"source {self.snapshot.reference.locator} defines nothing for this platform",
            )
        return repository.merged(self.snapshot.lookup(platform))


def compose(
    base: PackageRepository,
    overlays: Sequence[Overlay],
    *,
    platform: PlatformId | None = None,
) -> PackageRepository:
    """Fold ``overlays`` over ``base`` from left to right.

    Each overlay receives the repository produced by the previous one, so later
    overlays win when they redefine a name.

    Args:
        base: Platform-specific repository the fold starts from.
        overlays: Ordered overlays to apply.
        platform: Platform being evaluated; defaults to ``base.platform``.

    Returns:
        PackageRepository: Overlay-augmented repository.

    Raises:
        OverlayEvaluationError: If an overlay fails or returns something other
            than a repository for the same platform.
        ResolutionError: Propagated unmodified from overlays that resolve content.
    """

    target = platform or base.platform
    repository = base
    for overlay in overlays:
        label = getattr(overlay, "name", repr(overlay))
        LOGGER.debug("applying overlay %s for %s", label, target)
        try:
            result = overlay(repository, target)
        except (OverlayEvaluationError, ResolutionError):
            raise
        except Exception as exc:
            raise OverlayEvaluationError(label, target, str(exc) or type(exc).__name__) from exc
        if not isinstance(result, PackageRepository):
            raise OverlayEvaluationError(label, target, f"returned {type(result).__name__}, not a repository")
        if result.platform != target:
            raise OverlayEvaluationError(label, target, f"returned a repository for {result.platform}")
        repository = result
    return repository


__all__ = [
    "FunctionOverlay",
    "Overlay",
    "PackageDefinition",
    "PackageOverlay",
    "SnapshotOverlay",
    "compose",
]
