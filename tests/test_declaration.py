# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for declaration loading and pipeline wiring."""

from __future__ import annotations

from pathlib import Path

import pytest

from devshell.catalog import CatalogResolver
from devshell.declaration import DEFAULT_DECLARATION, DEFAULT_INPUTS, Declaration, load_declaration
from devshell.errors import DeclarationError, MalformedSourceError, UnknownSourceError
from devshell.platforms import DEFAULT_SYSTEMS
from devshell.toolchain import DEFAULT_COMPONENTS


def test_example_declaration_matches_built_in_default(examples_root: Path) -> None:
    declaration = load_declaration(examples_root / "devshell.toml")

    assert declaration == DEFAULT_DECLARATION
    assert declaration.inputs == DEFAULT_INPUTS
    assert declaration.platforms().enumerate() == frozenset(DEFAULT_SYSTEMS)


def test_default_declaration_wires_fenix_toolchain() -> None:
    shell = DEFAULT_DECLARATION.shell

    assert shell.base == "nixpkgs"
    assert shell.overlays == ("fenix",)
    assert shell.packages == ("rust-analyzer-nightly",)
    assert shell.toolchain.to_spec().components == frozenset(DEFAULT_COMPONENTS)


def test_example_declaration_evaluates_against_example_catalog(example_catalog: Path) -> None:
    pipeline = DEFAULT_DECLARATION.build_pipeline(CatalogResolver(example_catalog))

    environments = pipeline.evaluate(jobs=2)

    assert set(environments) == set(DEFAULT_SYSTEMS)
    for platform, environment in environments.items():
        toolchain, analyzer = environment.packages()
        assert toolchain.platform == platform
        assert set(toolchain.components) == set(DEFAULT_COMPONENTS)
        assert len(toolchain.components) == 5
        assert analyzer.name == "rust-analyzer-nightly"
        assert environment.description == "An allocator for witches"


def test_declared_systems_restrict_platforms() -> None:
    declaration = Declaration.from_mapping({"systems": ["x86_64-linux"]})

    assert declaration.platforms().enumerate() == frozenset({"x86_64-linux"})


@pytest.mark.parametrize(
    "data",
    [
        {"unexpected": True},
        {"shell": {"toolchain": {"components": ["rustc", "rustc"]}}},
        {"shell": {"toolchain": {"components": []}}},
        {"shell": {"overlays": ["fenix", "fenix"]}},
        {"shell": {"toolchain": {"channel": ""}}},
        {"systems": []},
    ],
)
def test_invalid_declarations_are_rejected(data: dict[str, object]) -> None:
    with pytest.raises(DeclarationError):
        Declaration.from_mapping(data, source="test.toml")


def test_undeclared_overlay_is_rejected() -> None:
    with pytest.raises(UnknownSourceError) as excinfo:
        Declaration.from_mapping({"shell": {"overlays": ["fenix", "mozilla"]}})

    assert excinfo.value.names == ("mozilla",)
    assert excinfo.value.role == "overlays"


def test_undeclared_base_is_rejected() -> None:
    with pytest.raises(UnknownSourceError, match="base repository"):
        Declaration.from_mapping({"inputs": {"fenix": "github:nix-community/fenix"}})


def test_malformed_input_locator_is_rejected() -> None:
    with pytest.raises(MalformedSourceError) as excinfo:
        Declaration.from_mapping({"inputs": {**DEFAULT_INPUTS, "fenix": "fenix"}})

    assert set(excinfo.value.problems) == {"fenix"}


def test_invalid_toml_is_a_declaration_error(tmp_path: Path) -> None:
    path = tmp_path / "devshell.toml"
    path.write_text("[shell\nname = 'x'\n", encoding="utf-8")

    with pytest.raises(DeclarationError, match="invalid TOML"):
        load_declaration(path)


def test_missing_declaration_file_is_a_declaration_error(tmp_path: Path) -> None:
    with pytest.raises(DeclarationError, match="cannot read declaration"):
        load_declaration(tmp_path / "devshell.toml")
