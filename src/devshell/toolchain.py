# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Toolchain providers, channel offerings, and component selection."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from .errors import ConfigurationError, UnknownChannelError, UnknownComponentError
from .repository import PackageHandle
from .types import PlatformId

DEFAULT_PROVIDER: Final[str] = "fenix"
DEFAULT_CHANNEL: Final[str] = "latest"
DEFAULT_COMPONENTS: Final[tuple[str, ...]] = ("rustc", "cargo", "clippy", "rustfmt", "rust-src")
KNOWN_CHANNELS: Final[tuple[str, ...]] = ("stable", "beta", "latest", "nightly")


@dataclass(frozen=True, slots=True)
class ToolchainSpec:
    """Requested toolchain: a channel of a provider narrowed to a component set."""

    channel: str = DEFAULT_CHANNEL
    components: frozenset[str] = frozenset(DEFAULT_COMPONENTS)
    provider: str = DEFAULT_PROVIDER

    def __post_init__(self) -> None:
        if isinstance(self.components, str):
            raise ConfigurationError(
                f"toolchain components must be a collection of names, not the string '{self.components}'",
            )
        components = frozenset(self.components)
        if not self.channel:
            raise ConfigurationError("toolchain channel must not be empty")
        if not self.provider:
            raise ConfigurationError("toolchain provider must not be empty")
        if not components:
            raise ConfigurationError("toolchain must request at least one component")
        if any(not isinstance(name, str) or not name for name in components):
            raise ConfigurationError("toolchain component names must be non-empty strings")
        object.__setattr__(self, "components", components)


@dataclass(frozen=True, slots=True)
class ToolchainOffering:
    """Components a provider publishes under one channel for one platform."""

    provider: str
    channel: str
    version: str
    platform: PlatformId
    available: Mapping[str, PackageHandle] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "available", MappingProxyType(dict(self.available)))

    @property
    def components(self) -> frozenset[str]:
        """Return the component names offered by this channel."""

        return frozenset(self.available)

    def select(self, names: Iterable[str]) -> PackageHandle:
        """Combine exactly the components in ``names`` into a single toolchain package.

        Args:
            names: Component names to include.

        Returns:
            PackageHandle: Toolchain whose ``components`` are the selected names, in
            the order the channel lists them.

        Raises:
            UnknownComponentError: Listing every requested name the channel lacks.
        """

        requested = frozenset(names)
        unknown = requested - self.components
        if unknown:
            raise UnknownComponentError(self.channel, unknown, self.components)
        selected = [component for name, component in self.available.items() if name in requested]
        binaries: list[str] = []
        for component in selected:
            binaries.extend(binary for binary in component.binaries if binary not in binaries)
        return PackageHandle(
            name=f"{self.provider}-{self.channel}-toolchain",
            version=self.version,
            platform=self.platform,
            binaries=tuple(binaries),
            components=tuple(component.name for component in selected),
            origin=self.provider,
        )


@dataclass(frozen=True, slots=True)
class ToolchainProvider:
    """Namespace registered by a toolchain-provider overlay."""

    name: str
    platform: PlatformId
    channels: Mapping[str, ToolchainOffering] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "channels", MappingProxyType(dict(self.channels)))

    def channel(self, name: str) -> ToolchainOffering:
        """Return the offering published under channel ``name``.

        Raises:
            UnknownChannelError: If the provider has no such channel.
        """

        try:
            return self.channels[name]
        except KeyError:
            raise UnknownChannelError(self.name, name, self.channels) from None


__all__ = [
    "DEFAULT_CHANNEL",
    "DEFAULT_COMPONENTS",
    "DEFAULT_PROVIDER",
    "KNOWN_CHANNELS",
    "ToolchainOffering",
    "ToolchainProvider",
    "ToolchainSpec",
]
