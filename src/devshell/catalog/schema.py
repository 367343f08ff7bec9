# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Schema loading utilities for validating snapshot documents."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import cache
from pathlib import Path
from typing import Final

from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

from ..types import JSONValue
from .io import load_schema

SCHEMA_ROOT: Final[Path] = Path(__file__).resolve().parents[1] / "schema"
SNAPSHOT_SCHEMA_NAME: Final[str] = "repository_snapshot.schema.json"


@dataclass(frozen=True, slots=True)
class SchemaRepository:
    """Hold the validator used for repository snapshot documents."""

    schema_root: Path
    snapshot_validator: Draft202012Validator

    @classmethod
    def load(cls, schema_root: Path | None = None) -> SchemaRepository:
        """Load schema validators from disk.

        Args:
            schema_root: Optional override for the schema directory.

        Returns:
            SchemaRepository: Repository configured with the snapshot validator.
        """
        resolved_root = schema_root or SCHEMA_ROOT
        schema = load_schema(resolved_root / SNAPSHOT_SCHEMA_NAME)
        Draft202012Validator.check_schema(schema)
        return cls(schema_root=resolved_root, snapshot_validator=Draft202012Validator(schema))

    def snapshot_errors(self, document: Mapping[str, JSONValue]) -> str | None:
        """Return the most relevant validation message for ``document``, if any."""

        error = best_match(self.snapshot_validator.iter_errors(document))
        if error is None:
            return None
        location = "/".join(str(part) for part in error.absolute_path) or "<root>"
        return f"{location}: {error.message}"


@cache
def default_schemas() -> SchemaRepository:
    """Return the schema repository bundled with the package."""

    return SchemaRepository.load()


__all__ = ["SCHEMA_ROOT", "SchemaRepository", "default_schemas"]
