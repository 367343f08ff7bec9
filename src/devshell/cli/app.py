# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import typer

from .check import check_command
from .lock import lock_command
from .show import show_command, systems_command

app = typer.Typer(
    help="Resolve declared development environments per platform.",
    no_args_is_help=True,
    add_completion=False,
)
app.command("show")(show_command)
app.command("systems")(systems_command)
app.command("check")(check_command)
app.command("lock")(lock_command)

__all__ = ["app"]
