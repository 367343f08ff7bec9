# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from devshell.errors import NotFoundError
from devshell.repository import PackageHandle, PackageRepository, RepositorySnapshot
from devshell.sources import SourceReference, SourceReferenceSet
from devshell.toolchain import ToolchainOffering, ToolchainProvider

NIXPKGS = "github:NixOS/nixpkgs/nixpkgs-unstable"
FENIX = "github:nix-community/fenix"
RUST_COMPONENTS = ("rustc", "cargo", "clippy", "rustfmt", "rust-src", "rust-docs")
TEST_PLATFORMS = ("x86_64-linux", "aarch64-darwin")


@dataclass
class InMemoryResolver:
    """Resolver returning prepared snapshots keyed by locator and recording calls."""

    snapshots: dict[str, RepositorySnapshot] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    def resolve(self, reference: SourceReference) -> RepositorySnapshot:
        self.calls.append(reference.name)
        try:
            return self.snapshots[reference.locator]
        except KeyError:
            raise NotFoundError(reference.locator, "not in test resolver") from None


def _offering(platform: str, channel: str, components: Iterable[str]) -> ToolchainOffering:
    version = "1.84.0-nightly" if channel == "latest" else "1.82.0"
    return ToolchainOffering(
        provider="fenix",
        channel=channel,
        version=version,
        platform=platform,
        available={
            name: PackageHandle(name=name, version=version, platform=platform, binaries=(name,), origin="fenix")
            for name in components
        },
    )


def _nixpkgs_repository(platform: str) -> PackageRepository:
    return PackageRepository(
        platform=platform,
        packages={
            "git": PackageHandle(name="git", version="2.47.0", platform=platform, binaries=("git",), origin="nixpkgs"),
            "rust-analyzer": PackageHandle(
                name="rust-analyzer",
                version="2024-10-14",
                platform=platform,
                binaries=("rust-analyzer",),
                origin="nixpkgs",
            ),
        },
    )


def _fenix_repository(platform: str) -> PackageRepository:
    provider = ToolchainProvider(
        name="fenix",
        platform=platform,
        channels={
            "latest": _offering(platform, "latest", RUST_COMPONENTS),
            "stable": _offering(platform, "stable", ("rustc", "cargo")),
        },
    )
    nightly = PackageHandle(
        name="rust-analyzer-nightly",
        version="2024-10-18",
        platform=platform,
        binaries=("rust-analyzer",),
        origin="fenix",
    )
    return PackageRepository(platform=platform, packages={nightly.name: nightly}, providers={"fenix": provider})


ResolverFactory = Callable[..., InMemoryResolver]


@pytest.fixture
def source_set() -> SourceReferenceSet:
    """Return the two sources used by pipeline tests."""

    return SourceReferenceSet.from_mapping({"nixpkgs": NIXPKGS, "fenix": FENIX})


@pytest.fixture
def make_resolver(source_set: SourceReferenceSet) -> ResolverFactory:
    """Return a factory building resolvers whose snapshots cover the given platforms."""

    def factory(
        *,
        nixpkgs_platforms: Sequence[str] = TEST_PLATFORMS,
        fenix_platforms: Sequence[str] = TEST_PLATFORMS,
    ) -> InMemoryResolver:
        nixpkgs = RepositorySnapshot(
            reference=source_set["nixpkgs"],
            revision="4c2fcb0",
            checksum="sha256-" + "0" * 64,
            platforms={platform: _nixpkgs_repository(platform) for platform in nixpkgs_platforms},
        )
        fenix = RepositorySnapshot(
            reference=source_set["fenix"],
            revision="9b3ab9e",
            checksum="sha256-" + "1" * 64,
            platforms={platform: _fenix_repository(platform) for platform in fenix_platforms},
        )
        return InMemoryResolver(snapshots={NIXPKGS: nixpkgs, FENIX: fenix})

    return factory


@pytest.fixture
def resolver(make_resolver: ResolverFactory) -> InMemoryResolver:
    """Return a resolver covering every test platform."""

    return make_resolver()


@pytest.fixture
def fenix_repository() -> PackageRepository:
    """Return an overlay-composed repository for ``x86_64-linux``."""

    return _nixpkgs_repository("x86_64-linux").merged(_fenix_repository("x86_64-linux"))


@pytest.fixture
def examples_root() -> Path:
    """Return the repository's examples directory."""

    return Path(__file__).resolve().parents[1] / "examples"


@pytest.fixture
def example_catalog(tmp_path: Path, examples_root: Path) -> Path:
    """Return a writable copy of the example snapshot catalog."""

    destination = tmp_path / "catalog"
    shutil.copytree(examples_root / "catalog", destination)
    return destination
