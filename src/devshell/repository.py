# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Immutable package repositories and resolved source snapshots."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from .errors import NotFoundError, ProviderNotFoundError, UnknownPackageError
from .sources import SourceReference
from .types import JSONValue, PlatformId

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .toolchain import ToolchainProvider


@dataclass(frozen=True, slots=True)
class PackageHandle:
    """Resolved package made available inside a development environment."""

    name: str
    version: str
    platform: PlatformId
    binaries: tuple[str, ...] = ()
    components: tuple[str, ...] = ()
    origin: str | None = None

    def to_dict(self) -> dict[str, JSONValue]:
        """Return a JSON-compatible description of the package."""

        payload: dict[str, JSONValue] = {
            "name": self.name,
            "version": self.version,
            "platform": self.platform,
            "binaries": list(self.binaries),
        }
        if self.components:
            payload["components"] = list(self.components)
        if self.origin is not None:
            payload["origin"] = self.origin
        return payload


@dataclass(frozen=True, slots=True)
class PackageRepository:
    """Platform-specific package index.

    Repositories are never mutated; every ``with_*``/``merged`` call returns a
    new value in which the incoming definitions shadow existing ones.
    """

    platform: PlatformId
    packages: Mapping[str, PackageHandle] = field(default_factory=dict)
    providers: Mapping[str, ToolchainProvider] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "packages", MappingProxyType(dict(self.packages)))
        object.__setattr__(self, "providers", MappingProxyType(dict(self.providers)))

    def __contains__(self, name: object) -> bool:
        return name in self.packages

    @property
    def names(self) -> tuple[str, ...]:
        """Return the package names available in the repository, sorted."""

        return tuple(sorted(self.packages))

    def get(self, name: str) -> PackageHandle | None:
        return self.packages.get(name)

    def lookup(self, name: str) -> PackageHandle:
        """Return the package registered under ``name``.

        Raises:
            UnknownPackageError: If ``name`` is not defined.
        """

        try:
            return self.packages[name]
        except KeyError:
            raise UnknownPackageError((name,), self.platform) from None

    def lookup_all(self, names: Iterable[str]) -> tuple[PackageHandle, ...]:
        """Return the packages for ``names`` in order, reporting every missing name at once.

        Duplicates in ``names`` are preserved.

        Raises:
            UnknownPackageError: If any name is not defined.
        """

        requested = tuple(names)
        missing = [name for name in dict.fromkeys(requested) if name not in self.packages]
        if missing:
            raise UnknownPackageError(missing, self.platform)
        return tuple(self.packages[name] for name in requested)

    def provider(self, name: str) -> ToolchainProvider:
        """Return the toolchain provider namespace registered under ``name``.

        Raises:
            ProviderNotFoundError: If no overlay registered the provider.
        """

        try:
            return self.providers[name]
        except KeyError:
            raise ProviderNotFoundError(name, self.platform, self.providers) from None

    def with_packages(self, packages: Iterable[PackageHandle]) -> PackageRepository:
        """Return a copy where ``packages`` shadow same-named definitions."""

        updated = dict(self.packages)
        for package in packages:
            updated[package.name] = package
        return PackageRepository(platform=self.platform, packages=updated, providers=self.providers)

    def with_provider(self, name: str, provider: ToolchainProvider) -> PackageRepository:
        """Return a copy with ``provider`` registered under ``name``."""

        providers = dict(self.providers)
        providers[name] = provider
        return PackageRepository(platform=self.platform, packages=self.packages, providers=providers)

    def merged(self, other: PackageRepository) -> PackageRepository:
        """Return a copy with every definition from ``other`` layered on top.

        Raises:
            ValueError: If ``other`` targets a different platform.
        """

        if other.platform != self.platform:
            raise ValueError(f"cannot merge {other.platform} definitions into a {self.platform} repository")
        return PackageRepository(
            platform=self.platform,
            packages={**self.packages, **other.packages},
            providers={**self.providers, **other.providers},
        )


@dataclass(frozen=True, slots=True)
class RepositorySnapshot:
    """Immutable content resolved from a single source reference."""

    reference: SourceReference
    revision: str
    checksum: str
    platforms: Mapping[PlatformId, PackageRepository] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for platform_id, repository in self.platforms.items():
            if repository.platform != platform_id:
                raise ValueError(
                    f"snapshot entry '{platform_id}' holds a repository for '{repository.platform}'",
                )
        object.__setattr__(self, "platforms", MappingProxyType(dict(self.platforms)))

    @property
    def name(self) -> str:
        return self.reference.name

    def supports(self, platform: PlatformId) -> bool:
        return platform in self.platforms

    def lookup(self, platform: PlatformId) -> PackageRepository:
        """Return the package repository for ``platform``.

        Raises:
            NotFoundError: If the snapshot provides no definitions for ``platform``.
        """

        try:
            return self.platforms[platform]
        except KeyError:
            raise NotFoundError(
                self.reference.locator,
                f"revision {self.revision} provides no packages for {platform}",
            ) from None


__all__ = [
    "PackageHandle",
    "PackageRepository",
    "RepositorySnapshot",
]
