# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Offline catalog of repository snapshots, with lock file support."""

from __future__ import annotations

from typing import Final

from .checksum import compute_checksum
from .lock import LockedSource, LockFile
from .resolver import CatalogResolver, locator_slug
from .schema import SchemaRepository
from .snapshot import snapshot_from_document

__all__: Final[tuple[str, ...]] = (
    "CatalogResolver",
    "LockFile",
    "LockedSource",
    "SchemaRepository",
    "compute_checksum",
    "locator_slug",
    "snapshot_from_document",
)
