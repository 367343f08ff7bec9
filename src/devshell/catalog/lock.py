# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Lock files pinning each declared source to a revision and checksum."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import DeclarationError, IntegrityError
from ..repository import RepositorySnapshot
from ..sources import SourceReference
from ..types import LOCK_FILE_VERSION


class LockedSource(BaseModel):
    """Pinned state of a single source."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    locator: str = Field(min_length=1)
    revision: str = Field(min_length=1)
    sha256: str = Field(pattern=r"^sha256-[0-9a-f]{64}$")


class LockFile(BaseModel):
    """Mapping of source name to its pinned revision and checksum."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: Literal[1] = LOCK_FILE_VERSION
    nodes: dict[str, LockedSource] = Field(default_factory=dict)

    @classmethod
    def from_snapshots(cls, snapshots: Mapping[str, RepositorySnapshot]) -> LockFile:
        """Build a lock file pinning every resolved snapshot."""

        return cls(
            nodes={
                name: LockedSource(
                    locator=snapshot.reference.locator,
                    revision=snapshot.revision,
                    sha256=snapshot.checksum,
                )
                for name, snapshot in sorted(snapshots.items())
            },
        )

    @classmethod
    def load(cls, path: Path) -> LockFile:
        """Read a lock file from ``path``.

        Raises:
            DeclarationError: If the file is missing or malformed.
        """

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DeclarationError(f"{path}: cannot read lock file ({exc.strerror})") from exc
        try:
            return cls.model_validate_json(text)
        except ValidationError as exc:
            raise DeclarationError(f"{path}: invalid lock file\n{exc}") from exc

    def dump(self, path: Path) -> None:
        """Write the lock file to ``path`` as indented JSON."""

        path.write_text(self.model_dump_json(indent=2) + "\n", encoding="utf-8")

    def verify(self, reference: SourceReference, checksum: str) -> None:
        """Check ``reference`` and ``checksum`` against the pinned node, if any.

        Sources absent from the lock file are accepted unchecked.

        Raises:
            IntegrityError: If the locator or checksum differs from the pinned values.
        """

        node = self.nodes.get(reference.name)
        if node is None:
            return
        if node.locator != reference.locator:
            raise IntegrityError(
                reference.locator,
                f"lock file pins '{reference.name}' to {node.locator}",
            )
        if node.sha256 != checksum:
            raise IntegrityError(
                reference.locator,
                f"checksum mismatch (locked {node.sha256}, found {checksum})",
            )


__all__ = ["LockFile", "LockedSource"]
