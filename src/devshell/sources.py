# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Source references and locator parsing."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, Protocol
from urllib.parse import parse_qs, urlsplit

from .errors import ConfigurationError, MalformedSourceError

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .repository import RepositorySnapshot

LOGGER = logging.getLogger(__name__)

FORGE_SCHEMES: Final[frozenset[str]] = frozenset({"github", "gitlab", "sourcehut"})
URL_SCHEMES: Final[frozenset[str]] = frozenset({"git+https", "git+ssh", "https", "http"})
LOCAL_SCHEMES: Final[frozenset[str]] = frozenset({"path", "git+file", "file"})

_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")
_SEGMENT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_.~-]+$")
_REV_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[0-9a-f]{7,40}$")


@dataclass(frozen=True, slots=True)
class Locator:
    """Parsed form of a source locator such as ``github:NixOS/nixpkgs/nixpkgs-unstable``."""

    raw: str
    scheme: str
    owner: str | None = None
    repo: str | None = None
    ref: str | None = None
    rev: str | None = None
    url: str | None = None

    @property
    def pinned(self) -> bool:
        """Return whether the locator names an exact revision."""

        return self.rev is not None

    def __str__(self) -> str:
        return self.raw


def parse_locator(raw: str) -> Locator:
    """Parse ``raw`` into a :class:`Locator`.

    Args:
        raw: Locator string in ``scheme:...`` form.

    Returns:
        Locator: Structured locator.

    Raises:
        ValueError: If ``raw`` is not a well-formed locator.
    """

    text = raw.strip()
    if not text or text != raw:
        raise ValueError("locator must be a non-empty string without surrounding whitespace")
    scheme, separator, remainder = text.partition(":")
    if not separator or not remainder:
        raise ValueError(f"locator '{raw}' has no scheme")
    if scheme in FORGE_SCHEMES:
        return _parse_forge(raw, scheme, remainder)
    if scheme in URL_SCHEMES:
        return _parse_url(raw, scheme)
    if scheme in LOCAL_SCHEMES:
        return _parse_local(raw, scheme, remainder)
    raise ValueError(f"unsupported locator scheme '{scheme}'")


def _parse_forge(raw: str, scheme: str, remainder: str) -> Locator:
    path, _, query = remainder.partition("?")
    segments = path.split("/")
    if len(segments) < 2 or any(not segment for segment in segments):
        raise ValueError(f"expected '{scheme}:owner/repo[/ref]'")
    if len(segments) > 3:
        raise ValueError(f"too many path segments in '{raw}'")
    for segment in segments:
        if not _SEGMENT_PATTERN.match(segment):
            raise ValueError(f"invalid path segment '{segment}'")
    owner, repo = segments[0], segments[1]
    path_ref = segments[2] if len(segments) == 3 else None
    params = _query_params(query)
    ref = params.get("ref")
    if path_ref is not None and ref is not None:
        raise ValueError("ref given both in the path and as a query parameter")
    rev = params.get("rev")
    if rev is not None and not _REV_PATTERN.match(rev):
        raise ValueError(f"rev '{rev}' is not a hexadecimal commit hash")
    return Locator(raw=raw, scheme=scheme, owner=owner, repo=repo, ref=path_ref or ref, rev=rev)


def _parse_url(raw: str, scheme: str) -> Locator:
    parts = urlsplit(raw)
    if not parts.netloc:
        raise ValueError(f"'{scheme}' locators require a host")
    params = _query_params(parts.query)
    return Locator(raw=raw, scheme=scheme, ref=params.get("ref"), rev=params.get("rev"), url=raw)


def _parse_local(raw: str, scheme: str, remainder: str) -> Locator:
    path = urlsplit(raw).path if remainder.startswith("//") else remainder.partition("?")[0]
    if not path:
        raise ValueError(f"'{scheme}' locators require a path")
    return Locator(raw=raw, scheme=scheme, url=path)


def _query_params(query: str) -> dict[str, str]:
    if not query:
        return {}
    parsed = parse_qs(query, keep_blank_values=True, strict_parsing=True)
    result: dict[str, str] = {}
    for key, values in parsed.items():
        if key not in {"ref", "rev", "dir"}:
            raise ValueError(f"unsupported query parameter '{key}'")
        if len(values) != 1 or not values[0]:
            raise ValueError(f"query parameter '{key}' must have exactly one value")
        result[key] = values[0]
    return result


@dataclass(frozen=True, slots=True)
class SourceReference:
    """Named, immutable reference to an external source of package definitions."""

    name: str
    locator: str
    parsed: Locator = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Parse the locator eagerly so malformed input fails before any resolution."""

        if not _NAME_PATTERN.match(self.name):
            raise MalformedSourceError({self.name: "source names must be identifiers"})
        try:
            parsed = parse_locator(self.locator)
        except ValueError as exc:
            raise MalformedSourceError({self.name: str(exc)}) from exc
        object.__setattr__(self, "parsed", parsed)


class RepositoryResolver(Protocol):
    """Resolve a source reference into an immutable repository snapshot."""

    def resolve(self, reference: SourceReference) -> RepositorySnapshot:
        """Return the snapshot for ``reference``.

        Raises:
            NotFoundError: If the source does not exist.
            NetworkError: If the source cannot be fetched.
            IntegrityError: If the fetched content fails verification.
        """
        ...


@dataclass(frozen=True, slots=True)
class SourceReferenceSet:
    """Ordered, read-only collection of source references keyed by name."""

    references: tuple[SourceReference, ...]
    _index: Mapping[str, SourceReference] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, SourceReference] = {}
        for reference in self.references:
            if reference.name in index:
                raise ConfigurationError(f"source '{reference.name}' is declared more than once")
            index[reference.name] = reference
        object.__setattr__(self, "_index", MappingProxyType(index))

    @classmethod
    def from_mapping(cls, inputs: Mapping[str, str]) -> SourceReferenceSet:
        """Build a reference set from ``name -> locator`` pairs.

        Every entry is validated before anything is returned; all malformed
        locators are reported together.

        Args:
            inputs: Mapping of source names to locator strings.

        Returns:
            SourceReferenceSet: Validated reference set preserving declaration order.

        Raises:
            MalformedSourceError: If any locator or name is malformed.
        """

        references: list[SourceReference] = []
        problems: dict[str, str] = {}
        for name, locator in inputs.items():
            try:
                references.append(SourceReference(name=name, locator=locator))
            except MalformedSourceError as exc:
                problems.update(exc.problems)
        if problems:
            raise MalformedSourceError(problems)
        return cls(tuple(references))

    @property
    def names(self) -> tuple[str, ...]:
        """Return the source names in declaration order."""

        return tuple(reference.name for reference in self.references)

    def __getitem__(self, name: str) -> SourceReference:
        return self._index[name]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[SourceReference]:
        return iter(self.references)

    def __len__(self) -> int:
        return len(self.references)

    def resolve(self, resolver: RepositoryResolver) -> Mapping[str, RepositorySnapshot]:
        """Resolve every reference through ``resolver``.

        Resolver failures propagate unmodified; nothing is cached or retried here.

        Args:
            resolver: External resolver producing repository snapshots.

        Returns:
            Mapping[str, RepositorySnapshot]: Read-only mapping of source name to snapshot.
        """

        snapshots: dict[str, RepositorySnapshot] = {}
        for reference in self.references:
            LOGGER.debug("resolving source %s from %s", reference.name, reference.locator)
            snapshots[reference.name] = resolver.resolve(reference)
        return MappingProxyType(snapshots)


__all__ = [
    "Locator",
    "RepositoryResolver",
    "SourceReference",
    "SourceReferenceSet",
    "parse_locator",
]
