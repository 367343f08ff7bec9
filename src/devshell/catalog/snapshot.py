# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Materialise validated snapshot documents into repository snapshots."""

from __future__ import annotations

from collections.abc import Mapping

from ..repository import PackageHandle, PackageRepository, RepositorySnapshot
from ..sources import SourceReference
from ..toolchain import ToolchainOffering, ToolchainProvider
from ..types import JSONValue, PlatformId
from .utils import expect_mapping, expect_string, optional_mapping, string_array


def snapshot_from_document(
    reference: SourceReference,
    document: Mapping[str, JSONValue],
    *,
    checksum: str,
) -> RepositorySnapshot:
    """Build a :class:`RepositorySnapshot` from a schema-valid document.

    Args:
        reference: Source reference the document was resolved for.
        document: Parsed snapshot document.
        checksum: Checksum of the raw document bytes.

    Returns:
        RepositorySnapshot: Immutable snapshot with one repository per platform.

    Raises:
        IntegrityError: If the document structure is inconsistent.
    """

    context = reference.locator
    revision = expect_string(document.get("revision"), key="revision", context=context)
    platforms_data = expect_mapping(document.get("platforms"), key="platforms", context=context)
    platforms: dict[PlatformId, PackageRepository] = {}
    for platform, raw in platforms_data.items():
        entry = expect_mapping(raw, key=f"platforms.{platform}", context=context)
        platforms[platform] = _repository(reference, platform, entry)
    return RepositorySnapshot(
        reference=reference,
        revision=revision,
        checksum=checksum,
        platforms=platforms,
    )


def _repository(
    reference: SourceReference,
    platform: PlatformId,
    entry: Mapping[str, JSONValue],
) -> PackageRepository:
    context = reference.locator
    packages_data = optional_mapping(entry.get("packages"), key=f"{platform}.packages", context=context)
    packages = {
        name: _package(name, platform, raw, origin=reference.name, context=f"{context}#{platform}.{name}")
        for name, raw in packages_data.items()
    }
    providers_data = optional_mapping(entry.get("providers"), key=f"{platform}.providers", context=context)
    providers = {
        name: _provider(name, platform, raw, context=f"{context}#{platform}.{name}")
        for name, raw in providers_data.items()
    }
    return PackageRepository(platform=platform, packages=packages, providers=providers)


def _package(
    name: str,
    platform: PlatformId,
    raw: JSONValue,
    *,
    origin: str,
    context: str,
) -> PackageHandle:
    data = expect_mapping(raw, key=name, context=context)
    return PackageHandle(
        name=name,
        version=expect_string(data.get("version"), key="version", context=context),
        platform=platform,
        binaries=string_array(data.get("binaries"), key="binaries", context=context),
        origin=origin,
    )


def _provider(name: str, platform: PlatformId, raw: JSONValue, *, context: str) -> ToolchainProvider:
    data = expect_mapping(raw, key=name, context=context)
    channels_data = expect_mapping(data.get("channels"), key="channels", context=context)
    channels: dict[str, ToolchainOffering] = {}
    for channel, channel_raw in channels_data.items():
        channel_context = f"{context}.{channel}"
        channel_data = expect_mapping(channel_raw, key=channel, context=channel_context)
        components_data = expect_mapping(
            channel_data.get("components"),
            key="components",
            context=channel_context,
        )
        channels[channel] = ToolchainOffering(
            provider=name,
            channel=channel,
            version=expect_string(channel_data.get("version"), key="version", context=channel_context),
            platform=platform,
            available={
                component: _package(
                    component,
                    platform,
                    component_raw,
                    origin=name,
                    context=f"{channel_context}.{component}",
                )
                for component, component_raw in components_data.items()
            },
        )
    return ToolchainProvider(name=name, platform=platform, channels=channels)


__all__ = ["snapshot_from_document"]
