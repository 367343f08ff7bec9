# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared option types and loading helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Final

import typer

from ..catalog import CatalogResolver, LockFile
from ..declaration import DECLARATION_FILENAME, DEFAULT_DECLARATION, Declaration, load_declaration

DEFAULT_CATALOG_DIR: Final[Path] = Path("catalog")

DeclarationOption = Annotated[
    Path | None,
    typer.Option(
        "--declaration",
        "-d",
        help=f"Declaration file (defaults to ./{DECLARATION_FILENAME}, then the built-in declaration).",
    ),
]
CatalogOption = Annotated[
    Path,
    typer.Option("--catalog", "-c", help="Directory holding repository snapshot documents."),
]
LockOption = Annotated[
    Path | None,
    typer.Option("--lock", "-l", help="Lock file every resolved source must match."),
]
NoColorOption = Annotated[bool, typer.Option("--no-color", help="Disable ANSI colour output.")]
NoEmojiOption = Annotated[bool, typer.Option("--no-emoji", help="Disable emoji output.")]


def resolve_declaration(path: Path | None) -> Declaration:
    """Return the declaration at ``path``, the working-directory file, or the default.

    Raises:
        DeclarationError: If the selected file is missing or invalid.
    """

    if path is not None:
        return load_declaration(path)
    local = Path.cwd() / DECLARATION_FILENAME
    if local.is_file():
        return load_declaration(local)
    return DEFAULT_DECLARATION


def build_resolver(catalog: Path, lock: Path | None) -> CatalogResolver:
    """Create the catalog resolver, pinned to ``lock`` when given.

    Raises:
        DeclarationError: If the lock file cannot be read.
    """

    return CatalogResolver(catalog_root=catalog, lock=LockFile.load(lock) if lock is not None else None)


__all__ = [
    "DEFAULT_CATALOG_DIR",
    "CatalogOption",
    "DeclarationOption",
    "LockOption",
    "NoColorOption",
    "NoEmojiOption",
    "build_resolver",
    "resolve_declaration",
]
