# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exception hierarchy raised while resolving development environments.

Two families matter to callers. :class:`ConfigurationError` subclasses signal an
authoring mistake in the declaration and are never worth retrying.
:class:`ResolutionError` subclasses come from the repository resolver and are
propagated unmodified.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from .types import PlatformId

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .environment import DevEnvironment


def _quoted(names: Iterable[str]) -> str:
    return ", ".join(f"'{name}'" for name in names)


class DevShellError(Exception):
    """Base class for every error raised by :mod:`devshell`."""


class ConfigurationError(DevShellError):
    """Raised when the environment declaration itself is invalid."""


class MalformedSourceError(ConfigurationError):
    """Raised when one or more source locators cannot be parsed."""

    def __init__(self, problems: Mapping[str, str]) -> None:
        """Record every malformed locator keyed by its source name.

        Args:
            problems: Mapping of source name to a description of the problem.
        """

        self.problems: Mapping[str, str] = MappingProxyType(dict(problems))
        details = "; ".join(f"{name}: {reason}" for name, reason in self.problems.items())
        super().__init__(f"malformed source reference(s): {details}")


class UnknownSourceError(ConfigurationError):
    """Raised when a declaration references an input that was never declared."""

    def __init__(self, names: Iterable[str], *, role: str) -> None:
        self.names = tuple(names)
        self.role = role
        super().__init__(f"{role} references undeclared input(s): {_quoted(self.names)}")


class UnsupportedPlatformError(ConfigurationError):
    """Raised when a platform outside the enumerated set is requested."""

    def __init__(self, platform: PlatformId, supported: Iterable[PlatformId]) -> None:
        self.platform = platform
        self.supported = tuple(sorted(supported))
        super().__init__(
            f"platform '{platform}' is not supported (expected one of {_quoted(self.supported)})",
        )


class ProviderNotFoundError(ConfigurationError):
    """Raised when the composed repository exposes no such toolchain provider."""

    def __init__(self, provider: str, platform: PlatformId, available: Iterable[str]) -> None:
        self.provider = provider
        self.platform = platform
        self.available = tuple(sorted(available))
        hint = _quoted(self.available) if self.available else "none"
        super().__init__(
            f"toolchain provider '{provider}' not found for {platform} (available: {hint})",
        )


class UnknownChannelError(ConfigurationError):
    """Raised when the requested channel is not offered by the provider."""

    def __init__(self, provider: str, channel: str, available: Iterable[str]) -> None:
        self.provider = provider
        self.channel = channel
        self.available = tuple(sorted(available))
        hint = _quoted(self.available) if self.available else "none"
        super().__init__(
            f"channel not found: '{channel}' is not offered by '{provider}' (available: {hint})",
        )


class UnknownComponentError(ConfigurationError):
    """Raised when requested components are not offered by a channel.

    Every unknown name is reported in a single failure.
    """

    def __init__(self, channel: str, unknown: Iterable[str], available: Iterable[str]) -> None:
        self.channel = channel
        self.unknown = tuple(sorted(unknown))
        self.available = tuple(sorted(available))
        super().__init__(
            f"unknown component(s) for channel '{channel}': {_quoted(self.unknown)}",
        )


class UnknownPackageError(ConfigurationError):
    """Raised when packages cannot be found in a composed repository."""

    def __init__(self, names: Iterable[str], platform: PlatformId) -> None:
        self.names = tuple(names)
        self.platform = platform
        super().__init__(f"unknown package(s) for {platform}: {_quoted(self.names)}")


class OverlayEvaluationError(ConfigurationError):
    """Raised when an overlay fails while being applied for a platform."""

    def __init__(self, overlay: str, platform: PlatformId, reason: str) -> None:
        self.overlay = overlay
        self.platform = platform
        self.reason = reason
        super().__init__(f"overlay '{overlay}' failed for {platform}: {reason}")


class DeclarationError(ConfigurationError):
    """Raised when a declaration document cannot be read or validated."""


class ResolutionError(DevShellError):
    """Raised by repository resolvers when a source cannot be materialised."""

    def __init__(self, locator: str, reason: str) -> None:
        self.locator = locator
        self.reason = reason
        super().__init__(f"{locator}: {reason}")


class NotFoundError(ResolutionError):
    """Raised when a source or one of its platforms does not exist."""


class NetworkError(ResolutionError):
    """Raised when a source cannot be fetched."""


class IntegrityError(ResolutionError):
    """Raised when fetched content does not match what was declared or locked."""


class PipelineEvaluationError(DevShellError):
    """Raised when one or more platforms fail to evaluate.

    Environments for platforms that evaluated successfully remain available via
    :attr:`environments`.
    """

    def __init__(
        self,
        failures: Mapping[PlatformId, DevShellError],
        environments: Mapping[PlatformId, DevEnvironment],
    ) -> None:
        self.failures: Mapping[PlatformId, DevShellError] = MappingProxyType(dict(failures))
        self.environments: Mapping[PlatformId, DevEnvironment] = MappingProxyType(dict(environments))
        details = "; ".join(f"{platform}: {error}" for platform, error in sorted(self.failures.items()))
        super().__init__(f"{len(self.failures)} platform(s) failed to evaluate: {details}")


__all__ = [
    "ConfigurationError",
    "DeclarationError",
    "DevShellError",
    "IntegrityError",
    "MalformedSourceError",
    "NetworkError",
    "NotFoundError",
    "OverlayEvaluationError",
    "PipelineEvaluationError",
    "ProviderNotFoundError",
    "ResolutionError",
    "UnknownChannelError",
    "UnknownComponentError",
    "UnknownPackageError",
    "UnknownSourceError",
    "UnsupportedPlatformError",
]
