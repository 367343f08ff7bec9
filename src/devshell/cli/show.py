# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Commands that evaluate and display environments."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Annotated

import typer

from ..environment import DevEnvironment
from ..errors import DevShellError, PipelineEvaluationError
from ..platforms import host_platform
from ..types import PlatformId
from .rendering import Reporter, environments_json
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


def _emit(reporter: Reporter, environments: Mapping[PlatformId, DevEnvironment], *, as_json: bool) -> None:
    if as_json:
        typer.echo(environments_json(environments))
    else:
        reporter.environments(environments)


def run_show(
    *,
    declaration_path: Path | None,
    catalog: Path,
    lock: Path | None,
    system: PlatformId | None,
    as_json: bool,
    reporter: Reporter,
) -> int:
    """Evaluate the declaration and print the resulting environments.

    When some platforms fail, the environments that did evaluate are still
    printed, followed by one failure line per platform. In JSON mode the
    failure lines go to stderr so stdout stays parseable.

    Args:
        declaration_path: Optional declaration file.
        catalog: Catalog directory used by the resolver.
        lock: Optional lock file.
        system: Restrict evaluation to a single platform.
        as_json: Emit JSON instead of tables.
        reporter: Console presentation settings.

    Returns:
        int: ``0`` on success, ``1`` when any evaluation fails.
    """

    environments: Mapping[PlatformId, DevEnvironment]
    try:
        pipeline = resolve_declaration(declaration_path).build_pipeline(build_resolver(catalog, lock))
        if system is not None:
            environments = {system: pipeline.evaluate_platform(system)}
        else:
            environments = pipeline.evaluate()
    except PipelineEvaluationError as exc:
        if exc.environments:
            _emit(reporter, exc.environments, as_json=as_json)
        reporter.failures(exc, stderr=as_json)
        return 1
    except DevShellError as exc:
        reporter.error(exc)
        return 1

    _emit(reporter, environments, as_json=as_json)
    return 0


def show_command(
    declaration: DeclarationOption = None,
    catalog: CatalogOption = DEFAULT_CATALOG_DIR,
    lock: LockOption = None,
    system: Annotated[
        str | None,
        typer.Option("--system", "-s", help="Only evaluate this platform."),
    ] = None,
    host: Annotated[bool, typer.Option("--host", help="Only evaluate the current host platform.")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Emit JSON instead of tables.")] = False,
    no_color: NoColorOption = False,
    no_emoji: NoEmojiOption = False,
) -> None:
    """Evaluate the declaration and show the packages of each environment."""

    if host and system is not None:
        raise typer.BadParameter("--host and --system are mutually exclusive")
    exit_code = run_show(
        declaration_path=declaration,
        catalog=catalog,
        lock=lock,
        system=host_platform() if host else system,
        as_json=as_json,
        reporter=Reporter.from_flags(no_color=no_color, no_emoji=no_emoji),
    )
    raise typer.Exit(code=exit_code)


def systems_command(
    declaration: DeclarationOption = None,
    no_color: NoColorOption = False,
    no_emoji: NoEmojiOption = False,
) -> None:
    """List the platforms the declaration produces environments for."""

    reporter = Reporter.from_flags(no_color=no_color, no_emoji=no_emoji)
    try:
        systems = resolve_declaration(declaration).platforms().enumerate()
    except DevShellError as exc:
        reporter.error(exc)
        raise typer.Exit(code=1) from exc
    host = host_platform()
    for system in sorted(systems):
        marker = " (host)" if system == host else ""
        reporter.status("info", f"{system}{marker}")
    if host not in systems:
        reporter.status("warn", f"host platform {host} is not declared")


__all__ = ["run_show", "show_command", "systems_command"]
