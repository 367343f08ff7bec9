# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Command that pins every declared source into a lock file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Final

import typer

from ..catalog import CatalogResolver, LockFile
from ..errors import DevShellError
from .rendering import Reporter
from .shared import (
    DEFAULT_CATALOG_DIR,
    CatalogOption,
    DeclarationOption,
    NoColorOption,
    NoEmojiOption,
    resolve_declaration,
)

LOCK_FILENAME: Final[str] = "devshell.lock"


def lock_command(
    declaration: DeclarationOption = None,
    catalog: CatalogOption = DEFAULT_CATALOG_DIR,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Where to write the lock file."),
    ] = Path(LOCK_FILENAME),
    no_color: NoColorOption = False,
    no_emoji: NoEmojiOption = False,
) -> None:
    """Resolve every declared source and record its revision and checksum."""

    reporter = Reporter.from_flags(no_color=no_color, no_emoji=no_emoji)
    try:
        sources = resolve_declaration(declaration).source_references()
        lock_file = LockFile.from_snapshots(sources.resolve(CatalogResolver(catalog_root=catalog)))
        lock_file.dump(output)
    except (DevShellError, OSError) as exc:
        reporter.error(exc)
        raise typer.Exit(code=1) from exc
    reporter.status("ok", f"locked {len(lock_file.nodes)} source(s) to {output}")


__all__ = ["LOCK_FILENAME", "lock_command"]
