# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolution pipeline turning sources and a toolchain selection into environments."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from functools import partial
from types import MappingProxyType
from typing import cast

from .environment import DevEnvironment, assemble
from .errors import DevShellError, PipelineEvaluationError, UnknownSourceError, UnsupportedPlatformError
from .overlays import Overlay, SnapshotOverlay, compose
from .platforms import PlatformEnumerator, StaticPlatforms, for_each_platform
from .repository import RepositorySnapshot
from .sources import RepositoryResolver, SourceReferenceSet
from .toolchain import ToolchainSpec
from .types import PlatformId

LOGGER = logging.getLogger(__name__)

OverlayRef = str | Overlay


@dataclass(frozen=True, slots=True)
class PlatformOutcome:
    """Result of evaluating the pipeline for a single platform."""

    platform: PlatformId
    environment: DevEnvironment | None = None
    error: DevShellError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DevShellPipeline:
    """Evaluate a development environment declaration for every supported platform.

    Sources, platforms, and the resolver are passed in explicitly; the pipeline
    holds no other state, so evaluations never observe one another.
    """

    def __init__(
        self,
        *,
        sources: SourceReferenceSet,
        resolver: RepositoryResolver,
        base: str,
        toolchain: ToolchainSpec,
        overlays: Sequence[OverlayRef] = (),
        extra_tools: Sequence[str] = (),
        platforms: PlatformEnumerator | Iterable[PlatformId] | None = None,
        name: str = "default",
        description: str | None = None,
    ) -> None:
        """Validate the wiring between declared inputs and their uses.

        Args:
            sources: Declared source references.
            resolver: Resolver turning references into snapshots.
            base: Source name providing the base package repository.
            toolchain: Requested toolchain.
            overlays: Ordered overlays; strings name sources whose overlay is applied.
            extra_tools: Package names appended after the toolchain.
            platforms: Platform enumerator or explicit platform list; defaults to
                :data:`~devshell.platforms.DEFAULT_SYSTEMS`.
            name: Environment name.
            description: Optional environment description.

        Raises:
            UnknownSourceError: If ``base`` or an overlay name is not a declared source.
        """

        if base not in sources:
            raise UnknownSourceError((base,), role="base repository")
        missing = [ref for ref in overlays if isinstance(ref, str) and ref not in sources]
        if missing:
            raise UnknownSourceError(missing, role="overlays")
        self._sources = sources
        self._resolver = resolver
        self._base = base
        self._toolchain = toolchain
        self._overlays = tuple(overlays)
        self._extra_tools = tuple(extra_tools)
        if platforms is None:
            self._platforms: PlatformEnumerator = StaticPlatforms()
        elif hasattr(platforms, "enumerate"):
            self._platforms = cast(PlatformEnumerator, platforms)
        else:
            self._platforms = StaticPlatforms(tuple(cast(Iterable[PlatformId], platforms)))
        self._name = name
        self._description = description

    @property
    def sources(self) -> SourceReferenceSet:
        return self._sources

    @property
    def toolchain(self) -> ToolchainSpec:
        return self._toolchain

    @property
    def extra_tools(self) -> tuple[str, ...]:
        return self._extra_tools

    def platforms(self) -> frozenset[PlatformId]:
        """Return the platforms this pipeline produces environments for."""

        return self._platforms.enumerate()

    def resolve(self) -> Mapping[str, RepositorySnapshot]:
        """Resolve every declared source through the resolver."""

        return self._sources.resolve(self._resolver)

    def evaluate_platform(
        self,
        platform: PlatformId,
        *,
        snapshots: Mapping[str, RepositorySnapshot] | None = None,
    ) -> DevEnvironment:
        """Evaluate the environment for one platform.

        Args:
            platform: Platform to evaluate; must be enumerated by the pipeline.
            snapshots: Previously resolved snapshots; resolved on demand when omitted.

        Returns:
            DevEnvironment: Environment for ``platform``.

        Raises:
            UnsupportedPlatformError: If ``platform`` is not enumerated.
            ConfigurationError: For authoring mistakes detected during evaluation.
            ResolutionError: Propagated from the resolver.
        """

        supported = self.platforms()
        if platform not in supported:
            raise UnsupportedPlatformError(platform, supported)
        resolved = snapshots if snapshots is not None else self.resolve()
        LOGGER.debug("evaluating %s for %s", self._name, platform)
        base = resolved[self._base].lookup(platform)
        overlays = [self._overlay(ref, resolved) for ref in self._overlays]
        composed = compose(base, overlays, platform=platform)
        return assemble(
            composed,
            self._toolchain,
            self._extra_tools,
            platform=platform,
            name=self._name,
            description=self._description,
        )

    def outcomes(self, *, jobs: int = 1) -> Mapping[PlatformId, PlatformOutcome]:
        """Evaluate every platform, capturing failures per platform.

        Source resolution happens once and is shared read-only; a resolution
        failure there aborts the whole evaluation.

        Args:
            jobs: Maximum number of platforms evaluated concurrently.

        Returns:
            Mapping[PlatformId, PlatformOutcome]: One outcome for each enumerated platform.
        """

        snapshots = self.resolve()
        return for_each_platform(self.platforms(), partial(self._outcome, snapshots), jobs=jobs)

    def evaluate(self, *, jobs: int = 1) -> Mapping[PlatformId, DevEnvironment]:
        """Evaluate every platform and return the complete output mapping.

        Args:
            jobs: Maximum number of platforms evaluated concurrently.

        Returns:
            Mapping[PlatformId, DevEnvironment]: Read-only mapping with exactly one
            entry per enumerated platform.

        Raises:
            PipelineEvaluationError: If any platform fails; successful environments
                are attached to the error.
        """

        outcomes = self.outcomes(jobs=jobs)
        environments = {
            platform: outcome.environment
            for platform, outcome in outcomes.items()
            if outcome.environment is not None
        }
        failures = {
            platform: outcome.error for platform, outcome in outcomes.items() if outcome.error is not None
        }
        if failures:
            raise PipelineEvaluationError(failures, environments)
        return MappingProxyType(environments)

    def _outcome(self, snapshots: Mapping[str, RepositorySnapshot], platform: PlatformId) -> PlatformOutcome:
        try:
            environment = self.evaluate_platform(platform, snapshots=snapshots)
        except DevShellError as exc:
            LOGGER.debug("evaluation failed for %s: %s", platform, exc)
            return PlatformOutcome(platform=platform, error=exc)
        return PlatformOutcome(platform=platform, environment=environment)

    @staticmethod
    def _overlay(ref: OverlayRef, snapshots: Mapping[str, RepositorySnapshot]) -> Overlay:
        if isinstance(ref, str):
            return SnapshotOverlay(snapshots[ref])
        return ref


__all__ = ["DevShellPipeline", "PlatformOutcome"]
