# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolve declared development environments into per-platform package sets."""

from __future__ import annotations

from typing import Final

from .declaration import DEFAULT_DECLARATION, Declaration, load_declaration
from .environment import DevEnvironment, assemble
from .errors import (
    ConfigurationError,
    DeclarationError,
    DevShellError,
    IntegrityError,
    MalformedSourceError,
    NetworkError,
    NotFoundError,
    OverlayEvaluationError,
    PipelineEvaluationError,
    ProviderNotFoundError,
    ResolutionError,
    UnknownChannelError,
    UnknownComponentError,
    UnknownPackageError,
    UnknownSourceError,
    UnsupportedPlatformError,
)
from .overlays import FunctionOverlay, Overlay, PackageDefinition, PackageOverlay, SnapshotOverlay, compose
from .pipeline import DevShellPipeline, PlatformOutcome
from .platforms import DEFAULT_SYSTEMS, PlatformEnumerator, StaticPlatforms, for_each_platform, host_platform
from .repository import PackageHandle, PackageRepository, RepositorySnapshot
from .sources import Locator, RepositoryResolver, SourceReference, SourceReferenceSet, parse_locator
from .toolchain import ToolchainOffering, ToolchainProvider, ToolchainSpec
from .types import PlatformId

__all__: Final[tuple[str, ...]] = (
    "DEFAULT_DECLARATION",
    "DEFAULT_SYSTEMS",
    "ConfigurationError",
    "Declaration",
    "DeclarationError",
    "DevEnvironment",
    "DevShellError",
    "DevShellPipeline",
    "FunctionOverlay",
    "IntegrityError",
    "Locator",
    "MalformedSourceError",
    "NetworkError",
    "NotFoundError",
    "Overlay",
    "OverlayEvaluationError",
    "PackageDefinition",
    "PackageHandle",
    "PackageOverlay",
    "PackageRepository",
    "PipelineEvaluationError",
    "PlatformEnumerator",
    "PlatformId",
    "PlatformOutcome",
    "ProviderNotFoundError",
    "RepositoryResolver",
    "RepositorySnapshot",
    "ResolutionError",
    "SnapshotOverlay",
    "SourceReference",
    "SourceReferenceSet",
    "StaticPlatforms",
    "ToolchainOffering",
    "ToolchainProvider",
    "ToolchainSpec",
    "UnknownChannelError",
    "UnknownComponentError",
    "UnknownPackageError",
    "UnknownSourceError",
    "UnsupportedPlatformError",
    "assemble",
    "compose",
    "for_each_platform",
    "host_platform",
    "load_declaration",
    "parse_locator",
)
