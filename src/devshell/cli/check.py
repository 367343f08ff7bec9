# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Command that evaluates every platform and reports each outcome."""

from __future__ import annotations

from typing import Annotated

import typer

from ..errors import DevShellError
from .rendering import Reporter
from .shared import (
    DEFAULT_CATALOG_DIR,
    CatalogOption,
    DeclarationOption,
    LockOption,
    NoColorOption,
    NoEmojiOption,
    build_resolver,
    resolve_declaration,
)


def check_command(
    declaration: DeclarationOption = None,
    catalog: CatalogOption = DEFAULT_CATALOG_DIR,
    lock: LockOption = None,
    jobs: Annotated[
        int,
        typer.Option("--jobs", "-j", min=1, help="Platforms evaluated concurrently."),
    ] = 1,
    no_color: NoColorOption = False,
    no_emoji: NoEmojiOption = False,
) -> None:
    """Evaluate every platform, listing all failures rather than stopping at the first."""

    reporter = Reporter.from_flags(no_color=no_color, no_emoji=no_emoji)
    try:
        decl = resolve_declaration(declaration)
        outcomes = decl.build_pipeline(build_resolver(catalog, lock)).outcomes(jobs=jobs)
    except DevShellError as exc:
        reporter.error(exc)
        raise typer.Exit(code=1) from exc

    reporter.section(f"Checking {decl.shell.name}")
    for outcome in outcomes.values():
        reporter.outcome(outcome)
    failed = sum(1 for outcome in outcomes.values() if not outcome.ok)
    raise typer.Exit(code=1 if failed else 0)


__all__ = ["check_command"]
