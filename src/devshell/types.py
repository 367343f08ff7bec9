# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases and constants for environment resolution."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]

PlatformId: TypeAlias = str

SNAPSHOT_SCHEMA_VERSION: Final[str] = "1.0.0"
LOCK_FILE_VERSION: Final[int] = 1

__all__ = [
    "LOCK_FILE_VERSION",
    "SNAPSHOT_SCHEMA_VERSION",
    "JSONPrimitive",
    "JSONValue",
    "PlatformId",
]
