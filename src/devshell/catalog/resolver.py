# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Offline resolver reading repository snapshots from a local catalog directory."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from ..errors import IntegrityError, NotFoundError
from ..repository import RepositorySnapshot
from ..sources import SourceReference
from .checksum import compute_checksum
from .io import parse_document
from .lock import LockFile
from .schema import SchemaRepository, default_schemas
from .snapshot import snapshot_from_document

LOGGER = logging.getLogger(__name__)

DOCUMENT_SUFFIX: Final[str] = ".json"
_SLUG_PATTERN: Final[re.Pattern[str]] = re.compile(r"[^a-z0-9]+")


def locator_slug(locator: str) -> str:
    """Return the catalog file stem for ``locator``.

    ``github:NixOS/nixpkgs/nixpkgs-unstable`` maps to
    ``github-nixos-nixpkgs-nixpkgs-unstable``.
    """

    return _SLUG_PATTERN.sub("-", locator.lower()).strip("-")


@dataclass(slots=True)
class CatalogResolver:
    """Resolve source references to snapshot documents stored under ``catalog_root``."""

    catalog_root: Path
    lock: LockFile | None = None
    schemas: SchemaRepository = field(default_factory=default_schemas)

    def document_path(self, reference: SourceReference) -> Path:
        return self.catalog_root / f"{locator_slug(reference.locator)}{DOCUMENT_SUFFIX}"

    def resolve(self, reference: SourceReference) -> RepositorySnapshot:
        """Load, verify, and materialise the snapshot for ``reference``.

        Args:
            reference: Source reference to resolve.

        Returns:
            RepositorySnapshot: Snapshot described by the catalog document.

        Raises:
            NotFoundError: If the catalog holds no document for the locator.
            IntegrityError: If the document is unreadable, fails schema validation,
                describes another source, or does not match the lock file.
        """

        path = self.document_path(reference)
        try:
            payload = path.read_bytes()
        except FileNotFoundError:
            raise NotFoundError(reference.locator, f"no catalog document at {path}") from None
        except OSError as exc:
            raise NotFoundError(reference.locator, f"cannot read {path} ({exc.strerror})") from exc
        checksum = compute_checksum(payload)
        if self.lock is not None:
            self.lock.verify(reference, checksum)
        try:
            document = parse_document(payload, context=str(path))
        except ValueError as exc:
            raise IntegrityError(reference.locator, str(exc)) from exc
        problem = self.schemas.snapshot_errors(document)
        if problem is not None:
            raise IntegrityError(reference.locator, f"{path}: {problem}")
        if document.get("source") != reference.locator:
            raise IntegrityError(
                reference.locator,
                f"{path} describes source {document.get('source')!r}",
            )
        LOGGER.debug("resolved %s to %s (%s)", reference.locator, path, checksum)
        return snapshot_from_document(reference, document, checksum=checksum)


__all__ = ["CatalogResolver", "locator_slug"]
