# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for toolchain selection and environment assembly."""

from __future__ import annotations

import pytest

from devshell.environment import assemble
from devshell.errors import (
    ConfigurationError,
    ProviderNotFoundError,
    UnknownChannelError,
    UnknownComponentError,
    UnknownPackageError,
)
from devshell.repository import PackageRepository
from devshell.toolchain import DEFAULT_COMPONENTS, ToolchainSpec


def test_default_toolchain_selects_exactly_requested_components(fenix_repository: PackageRepository) -> None:
    environment = assemble(fenix_repository, ToolchainSpec(), ["rust-analyzer-nightly"])

    toolchain = environment.packages()[0]
    assert toolchain is environment.toolchain
    assert toolchain.name == "fenix-latest-toolchain"
    assert toolchain.version == "1.84.0-nightly"
    assert set(toolchain.components) == set(DEFAULT_COMPONENTS)
    assert "rust-docs" not in toolchain.components
    assert environment.packages()[1].name == "rust-analyzer-nightly"
    assert len(environment.packages()) == 2


def test_toolchain_components_follow_channel_order(fenix_repository: PackageRepository) -> None:
    spec = ToolchainSpec(components=frozenset({"rustfmt", "rustc"}))

    environment = assemble(fenix_repository, spec)

    assert environment.toolchain.components == ("rustc", "rustfmt")
    assert environment.toolchain.binaries == ("rustc", "rustfmt")


def test_unknown_component_is_reported(fenix_repository: PackageRepository) -> None:
    spec = ToolchainSpec(components=frozenset({"rustc", "nonexistent-tool"}))

    with pytest.raises(UnknownComponentError) as excinfo:
        assemble(fenix_repository, spec)

    assert excinfo.value.unknown == ("nonexistent-tool",)
    assert "rustc" in excinfo.value.available


def test_every_unknown_component_is_reported_together(fenix_repository: PackageRepository) -> None:
    spec = ToolchainSpec(components=frozenset({"rustc", "miri", "nonexistent-tool"}))

    with pytest.raises(UnknownComponentError) as excinfo:
        assemble(fenix_repository, spec)

    assert excinfo.value.unknown == ("miri", "nonexistent-tool")


def test_unknown_channel_is_reported(fenix_repository: PackageRepository) -> None:
    with pytest.raises(UnknownChannelError, match="channel not found") as excinfo:
        assemble(fenix_repository, ToolchainSpec(channel="beta"))

    assert excinfo.value.available == ("latest", "stable")


def test_stable_channel_lacks_default_components(fenix_repository: PackageRepository) -> None:
    with pytest.raises(UnknownComponentError) as excinfo:
        assemble(fenix_repository, ToolchainSpec(channel="stable"))

    assert excinfo.value.unknown == ("clippy", "rust-src", "rustfmt")


def test_missing_provider_is_a_configuration_error() -> None:
    repository = PackageRepository(platform="x86_64-linux")

    with pytest.raises(ProviderNotFoundError) as excinfo:
        assemble(repository, ToolchainSpec())

    assert isinstance(excinfo.value, ConfigurationError)
    assert excinfo.value.provider == "fenix"


def test_every_missing_extra_tool_is_reported(fenix_repository: PackageRepository) -> None:
    with pytest.raises(UnknownPackageError) as excinfo:
        assemble(fenix_repository, ToolchainSpec(), ["ripgrep", "git", "fd"])

    assert excinfo.value.names == ("ripgrep", "fd")
    assert excinfo.value.platform == "x86_64-linux"


def test_duplicate_extra_tools_are_kept(fenix_repository: PackageRepository) -> None:
    environment = assemble(fenix_repository, ToolchainSpec(), ["git", "git"])

    assert [package.name for package in environment.packages()] == [
        "fenix-latest-toolchain",
        "git",
        "git",
    ]


def test_assembly_is_deterministic(fenix_repository: PackageRepository) -> None:
    first = assemble(fenix_repository, ToolchainSpec(), ["rust-analyzer-nightly"])
    second = assemble(fenix_repository, ToolchainSpec(), ["rust-analyzer-nightly"])

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_environment_serialises_to_plain_data(fenix_repository: PackageRepository) -> None:
    environment = assemble(
        fenix_repository,
        ToolchainSpec(),
        ["rust-analyzer-nightly"],
        name="default",
        description="An allocator for witches",
    )

    payload = environment.to_dict()

    assert payload["platform"] == "x86_64-linux"
    assert payload["description"] == "An allocator for witches"
    assert payload["packages"][0]["origin"] == "fenix"  # type: ignore[index]
    assert "components" not in payload["packages"][1]  # type: ignore[index,operator]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"channel": ""},
        {"provider": ""},
        {"components": frozenset()},
        {"components": frozenset({""})},
    ],
)
def test_toolchain_spec_rejects_invalid_values(kwargs: dict[str, object]) -> None:
    with pytest.raises(ConfigurationError):
        ToolchainSpec(**kwargs)  # type: ignore[arg-type]


def test_toolchain_spec_rejects_bare_string_components() -> None:
    with pytest.raises(ConfigurationError, match="not the string 'rustc'"):
        ToolchainSpec(components="rustc")  # type: ignore[arg-type]
