# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Declaration models describing a development shell and its inputs."""

from __future__ import annotations

import tomllib
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import DeclarationError, UnknownSourceError
from .pipeline import DevShellPipeline
from .platforms import DEFAULT_SYSTEMS, PlatformEnumerator, StaticPlatforms
from .sources import RepositoryResolver, SourceReferenceSet
from .toolchain import DEFAULT_CHANNEL, DEFAULT_COMPONENTS, DEFAULT_PROVIDER, ToolchainSpec
from .types import PlatformId

DECLARATION_FILENAME: Final[str] = "devshell.toml"
DEFAULT_INPUTS: Final[dict[str, str]] = {
    "nixpkgs": "github:NixOS/nixpkgs/nixpkgs-unstable",
    "fenix": "github:nix-community/fenix",
    "flake-utils": "github:numtide/flake-utils",
}
DEFAULT_EXTRA_PACKAGES: Final[tuple[str, ...]] = ("rust-analyzer-nightly",)


def _unique(values: tuple[str, ...], *, field_name: str) -> tuple[str, ...]:
    duplicates = sorted({value for value in values if values.count(value) > 1})
    if duplicates:
        raise ValueError(f"{field_name} contains duplicates: {', '.join(duplicates)}")
    if any(not value for value in values):
        raise ValueError(f"{field_name} entries must be non-empty")
    return values


class ToolchainSection(BaseModel):
    """Toolchain selection inside a shell declaration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: str = Field(default=DEFAULT_PROVIDER, min_length=1)
    channel: str = Field(default=DEFAULT_CHANNEL, min_length=1)
    components: tuple[str, ...] = DEFAULT_COMPONENTS

    @field_validator("components")
    @classmethod
    def _check_components(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("at least one component is required")
        return _unique(value, field_name="components")

    def to_spec(self) -> ToolchainSpec:
        return ToolchainSpec(channel=self.channel, components=frozenset(self.components), provider=self.provider)


class ShellSection(BaseModel):
    """Shell definition: base repository, overlays, toolchain, and extra packages."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(default="default", min_length=1)
    base: str = Field(default="nixpkgs", min_length=1)
    overlays: tuple[str, ...] = (DEFAULT_PROVIDER,)
    packages: tuple[str, ...] = DEFAULT_EXTRA_PACKAGES
    toolchain: ToolchainSection = Field(default_factory=ToolchainSection)

    @field_validator("overlays")
    @classmethod
    def _check_overlays(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _unique(value, field_name="overlays")


class Declaration(BaseModel):
    """Top-level development environment declaration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    description: str | None = None
    inputs: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_INPUTS))
    systems: tuple[PlatformId, ...] | None = None
    shell: ShellSection = Field(default_factory=ShellSection)

    @field_validator("systems")
    @classmethod
    def _check_systems(cls, value: tuple[PlatformId, ...] | None) -> tuple[PlatformId, ...] | None:
        if value is None:
            return None
        if not value:
            raise ValueError("at least one system is required when 'systems' is given")
        return _unique(value, field_name="systems")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, source: str = "<declaration>") -> Declaration:
        """Validate ``data`` and check that every referenced input is declared.

        Args:
            data: Raw declaration mapping, for example parsed TOML.
            source: Label used in error messages.

        Returns:
            Declaration: Validated declaration.

        Raises:
            DeclarationError: If ``data`` does not match the declaration schema.
            MalformedSourceError: If any input locator is malformed.
            UnknownSourceError: If the shell references undeclared inputs.
        """

        try:
            declaration = cls.model_validate(dict(data))
        except ValidationError as exc:
            raise DeclarationError(f"{source}: invalid declaration\n{exc}") from exc
        declaration.check_references()
        return declaration

    def check_references(self) -> None:
        """Validate locators and cross references between the shell and its inputs."""

        sources = self.source_references()
        _require_declared((self.shell.base,), sources, role="base repository")
        _require_declared(self.shell.overlays, sources, role="overlays")

    def source_references(self) -> SourceReferenceSet:
        return SourceReferenceSet.from_mapping(self.inputs)

    def platforms(self) -> StaticPlatforms:
        return StaticPlatforms(self.systems or DEFAULT_SYSTEMS)

    def build_pipeline(
        self,
        resolver: RepositoryResolver,
        *,
        platforms: PlatformEnumerator | Iterable[PlatformId] | None = None,
    ) -> DevShellPipeline:
        """Wire a :class:`DevShellPipeline` for this declaration.

        Args:
            resolver: Resolver used for every declared input.
            platforms: Optional override of the declared systems.

        Returns:
            DevShellPipeline: Pipeline ready for evaluation.
        """

        return DevShellPipeline(
            sources=self.source_references(),
            resolver=resolver,
            base=self.shell.base,
            toolchain=self.shell.toolchain.to_spec(),
            overlays=self.shell.overlays,
            extra_tools=self.shell.packages,
            platforms=platforms if platforms is not None else self.platforms(),
            name=self.shell.name,
            description=self.description,
        )


def _require_declared(names: Iterable[str], sources: SourceReferenceSet, *, role: str) -> None:
    missing = [name for name in names if name not in sources]
    if missing:
        raise UnknownSourceError(missing, role=role)


def load_declaration(path: Path) -> Declaration:
    """Read and validate a TOML declaration file.

    Raises:
        DeclarationError: If the file cannot be read, parsed, or validated.
    """

    try:
        with path.open("rb") as stream:
            data = tomllib.load(stream)
    except OSError as exc:
        raise DeclarationError(f"{path}: cannot read declaration ({exc.strerror})") from exc
    except tomllib.TOMLDecodeError as exc:
        raise DeclarationError(f"{path}: invalid TOML ({exc})") from exc
    return Declaration.from_mapping(data, source=str(path))


DEFAULT_DECLARATION: Final[Declaration] = Declaration(description="An allocator for witches")

__all__ = [
    "DECLARATION_FILENAME",
    "DEFAULT_DECLARATION",
    "DEFAULT_INPUTS",
    "Declaration",
    "ShellSection",
    "ToolchainSection",
    "load_declaration",
]
