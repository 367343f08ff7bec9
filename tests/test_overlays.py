# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for overlay composition."""

from __future__ import annotations

import pytest

from devshell.errors import NetworkError, OverlayEvaluationError
from devshell.overlays import FunctionOverlay, PackageDefinition, PackageOverlay, SnapshotOverlay, compose
from devshell.repository import PackageRepository, RepositorySnapshot
from devshell.sources import SourceReference

PLATFORM = "x86_64-linux"


@pytest.fixture
def base() -> PackageRepository:
    return PackageRepository(platform=PLATFORM)


@pytest.fixture
def overlay_a() -> PackageOverlay:
    return PackageOverlay("a", {"x": PackageDefinition(version="1.0"), "only-a": PackageDefinition(version="1")})


@pytest.fixture
def overlay_b() -> PackageOverlay:
    return PackageOverlay("b", {"x": PackageDefinition(version="2.0", binaries=("x",))})


def test_later_overlay_wins(base: PackageRepository, overlay_a: PackageOverlay, overlay_b: PackageOverlay) -> None:
    composed = compose(base, [overlay_a, overlay_b])

    assert composed.lookup("x").version == "2.0"
    assert composed.lookup("x").origin == "b"
    assert composed.lookup("only-a").origin == "a"


def test_composition_is_not_commutative(
    base: PackageRepository,
    overlay_a: PackageOverlay,
    overlay_b: PackageOverlay,
) -> None:
    forward = compose(base, [overlay_a, overlay_b])
    reverse = compose(base, [overlay_b, overlay_a])

    assert forward.lookup("x").version == "2.0"
    assert reverse.lookup("x").version == "1.0"
    assert forward.lookup("x") != reverse.lookup("x")


def test_each_overlay_sees_previous_result(base: PackageRepository, overlay_a: PackageOverlay) -> None:
    seen: list[tuple[str, ...]] = []

    def derive(repository: PackageRepository, platform: str) -> PackageRepository:
        seen.append(repository.names)
        upstream = repository.lookup("x")
        return PackageOverlay("derived", {"x-wrapped": PackageDefinition(version=upstream.version)})(
            repository,
            platform,
        )

    composed = compose(base, [overlay_a, FunctionOverlay("derive", derive)])

    assert seen == [("only-a", "x")]
    assert composed.lookup("x-wrapped").version == "1.0"


def test_compose_does_not_mutate_base(base: PackageRepository, overlay_a: PackageOverlay) -> None:
    compose(base, [overlay_a])

    assert base.names == ()


def test_empty_overlay_sequence_returns_base(base: PackageRepository) -> None:
    assert compose(base, []) is base


def test_overlay_referencing_undefined_attribute_fails(base: PackageRepository) -> None:
    broken = FunctionOverlay("broken", lambda repository, platform: repository.with_packages([repository.lookup("missing")]))

    with pytest.raises(OverlayEvaluationError) as excinfo:
        compose(base, [broken])

    assert excinfo.value.overlay == "broken"
    assert excinfo.value.platform == PLATFORM
    assert "missing" in str(excinfo.value)


def test_overlay_returning_wrong_type_fails(base: PackageRepository) -> None:
    with pytest.raises(OverlayEvaluationError, match="not a repository"):
        compose(base, [FunctionOverlay("bogus", lambda repository, platform: {"x": 1})])  # type: ignore[arg-type,return-value]


def test_overlay_returning_other_platform_fails(base: PackageRepository) -> None:
    other = FunctionOverlay("other", lambda repository, platform: PackageRepository(platform="aarch64-darwin"))

    with pytest.raises(OverlayEvaluationError, match="aarch64-darwin"):
        compose(base, [other])


def test_resolution_errors_propagate_unmodified(base: PackageRepository) -> None:
    def fetch(repository: PackageRepository, platform: str) -> PackageRepository:
        raise NetworkError("github:nix-community/fenix", "connection reset")

    with pytest.raises(NetworkError):
        compose(base, [FunctionOverlay("fetching", fetch)])


def test_snapshot_overlay_layers_platform_definitions(fenix_repository: PackageRepository) -> None:
    reference = SourceReference(name="extra", locator="github:example/extra")
    extra = PackageOverlay("extra", {"git": PackageDefinition(version="9.9")})(
        PackageRepository(platform=PLATFORM),
        PLATFORM,
    )
    snapshot = RepositorySnapshot(reference=reference, revision="abc", checksum="sha256-x", platforms={PLATFORM: extra})

    composed = compose(fenix_repository, [SnapshotOverlay(snapshot)])

    assert composed.lookup("git").version == "9.9"
    assert composed.provider("fenix").name == "fenix"


def test_snapshot_overlay_without_platform_fails(base: PackageRepository) -> None:
    reference = SourceReference(name="fenix", locator="github:nix-community/fenix")
    snapshot = RepositorySnapshot(reference=reference, revision="abc", checksum="sha256-x", platforms={})

    with pytest.raises(OverlayEvaluationError) as excinfo:
        compose(base, [SnapshotOverlay(snapshot)])

    assert excinfo.value.overlay == "fenix"


def test_unexpected_exceptions_are_scoped_to_the_overlay(base: PackageRepository) -> None:
    def explode(repository: PackageRepository, platform: str) -> PackageRepository:
        raise RuntimeError

    with pytest.raises(OverlayEvaluationError, match="RuntimeError") as excinfo:
        compose(base, [FunctionOverlay("explode", explode)])

    assert isinstance(excinfo.value.__cause__, RuntimeError)
