# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Development environment values and their assembly from a composed repository."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .repository import PackageHandle, PackageRepository
from .toolchain import ToolchainSpec
from .types import JSONValue, PlatformId

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DevEnvironment:
    """Fully resolved set of packages for one platform.

    The external materialiser decides how entries are activated; this value
    only describes them.
    """

    platform: PlatformId
    entries: tuple[PackageHandle, ...]
    name: str = "default"
    description: str | None = None

    def packages(self) -> tuple[PackageHandle, ...]:
        """Return the packages in declaration order, duplicates included."""

        return self.entries

    @property
    def toolchain(self) -> PackageHandle:
        return self.entries[0]

    def to_dict(self) -> dict[str, JSONValue]:
        """Return a JSON-compatible description of the environment."""

        return {
            "name": self.name,
            "platform": self.platform,
            "description": self.description,
            "packages": [package.to_dict() for package in self.entries],
        }


def assemble(
    repository: PackageRepository,
    toolchain: ToolchainSpec,
    extra_tools: Sequence[str] = (),
    *,
    platform: PlatformId | None = None,
    name: str = "default",
    description: str | None = None,
) -> DevEnvironment:
    """Build the development environment for one platform.

    Args:
        repository: Overlay-composed repository for the platform.
        toolchain: Requested provider, channel, and component set.
        extra_tools: Package names appended after the toolchain, in order.
        platform: Platform the environment is for; defaults to ``repository.platform``.
        name: Environment name.
        description: Optional human-readable description.

    Returns:
        DevEnvironment: Environment whose packages are ``[toolchain, *extra_tools]``.

    Raises:
        ProviderNotFoundError: If no overlay registered ``toolchain.provider``.
        UnknownChannelError: If the provider lacks ``toolchain.channel``.
        UnknownComponentError: If any requested component is not offered.
        UnknownPackageError: If any extra tool is missing from ``repository``.
    """

    target = platform or repository.platform
    offering = repository.provider(toolchain.provider).channel(toolchain.channel)
    selected = offering.select(toolchain.components)
    extras = repository.lookup_all(extra_tools)
    LOGGER.debug(
        "assembled %s for %s: %s %s with %d extra tool(s)",
        name,
        target,
        selected.name,
        selected.version,
        len(extras),
    )
    return DevEnvironment(
        platform=target,
        entries=(selected, *extras),
        name=name,
        description=description,
    )


__all__ = ["DevEnvironment", "assemble"]
