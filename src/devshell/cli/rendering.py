# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rich rendering of environments, per-platform outcomes, and failures."""

from __future__ import annotations

import json
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from functools import cache
from typing import Final, Literal

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from ..environment import DevEnvironment
from ..errors import PipelineEvaluationError, UnknownComponentError
from ..pipeline import PlatformOutcome
from ..types import PlatformId

StatusKind = Literal["info", "ok", "warn", "fail"]

_STATUS_MARKERS: Final[dict[StatusKind, tuple[str, str]]] = {
    "info": ("ℹ️ ", "cyan"),
    "ok": ("✅ ", "green"),
    "warn": ("⚠️ ", "yellow"),
    "fail": ("❌ ", "red"),
}


def stream_is_tty(*, stderr: bool = False) -> bool:
    """Return whether the selected output stream is attached to a terminal."""

    stream = sys.stderr if stderr else sys.stdout
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


@cache
def _console(color: bool, emoji: bool, tty: bool, stderr: bool) -> Console:
    # Consoles resolve sys.stdout/sys.stderr lazily, so a cached instance follows redirection.
    return Console(
        color_system="auto" if color and tty else None,
        force_terminal=tty,
        no_color=not (color and tty),
        emoji=emoji,
        soft_wrap=True,
        stderr=stderr,
    )


def build_environment_table(environment: DevEnvironment) -> Table:
    """Return a table listing the packages of ``environment`` in order."""

    title = f"{environment.name} ({environment.platform})"
    table = Table(title=title, title_justify="left", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Package", style="bold cyan", no_wrap=True)
    table.add_column("Version")
    table.add_column("Provides")
    table.add_column("Origin", style="dim")
    for index, package in enumerate(environment.packages(), start=1):
        provides = ", ".join(package.components or package.binaries) or "-"
        table.add_row(str(index), package.name, package.version, provides, package.origin or "-")
    return table


def environments_json(environments: Mapping[PlatformId, DevEnvironment]) -> str:
    """Serialise ``environments`` as indented JSON keyed by platform."""

    payload = {platform: environments[platform].to_dict() for platform in sorted(environments)}
    return json.dumps(payload, indent=2)


def describe_error(error: BaseException) -> str:
    """Return a one-paragraph description of ``error`` for console output."""

    message = str(error) or type(error).__name__
    if isinstance(error, UnknownComponentError) and error.available:
        message += f"\navailable: {', '.join(error.available)}"
    return message


def outcome_line(outcome: PlatformOutcome) -> tuple[StatusKind, str]:
    """Return the status kind and summary line describing ``outcome``."""

    if outcome.environment is not None:
        toolchain = outcome.environment.toolchain
        extras = len(outcome.environment.entries) - 1
        return "ok", f"{outcome.platform}: {toolchain.name} {toolchain.version} + {extras} package(s)"
    return "fail", f"{outcome.platform}: {describe_error(outcome.error) if outcome.error else 'no result'}"


@dataclass(frozen=True, slots=True)
class Reporter:
    """Console presentation shared by every command, honouring colour and emoji flags."""

    use_color: bool
    use_emoji: bool

    @classmethod
    def from_flags(cls, *, no_color: bool, no_emoji: bool) -> Reporter:
        return cls(use_color=not no_color, use_emoji=not no_emoji)

    def console(self, *, stderr: bool = False) -> Console:
        tty = stream_is_tty(stderr=stderr)
        return _console(self.use_color, self.use_emoji, tty, stderr)

    def status(self, kind: StatusKind, message: str, *, stderr: bool = False) -> None:
        """Print ``message`` prefixed with the marker for ``kind``."""

        marker, style = _STATUS_MARKERS[kind]
        console = self.console(stderr=stderr)
        text = Text(f"{marker if self.use_emoji else ''}{message}")
        if self.use_color and console.is_terminal:
            text.stylize(style)
        console.print(text)

    def section(self, title: str) -> None:
        console = self.console()
        if self.use_color and console.is_terminal:
            console.print()
            console.print(Rule(title))
        else:
            console.print(f"\n--- {title} ---")

    def outcome(self, outcome: PlatformOutcome) -> None:
        kind, message = outcome_line(outcome)
        self.status(kind, message)

    def environments(self, environments: Mapping[PlatformId, DevEnvironment]) -> None:
        """Print one table per environment, ordered by platform."""

        console = self.console()
        for platform in sorted(environments):
            console.print(build_environment_table(environments[platform]))

    def failures(self, error: PipelineEvaluationError, *, stderr: bool = False) -> None:
        """Print one line per platform that failed to evaluate."""

        for platform, failure in sorted(error.failures.items()):
            self.status("fail", f"{platform}: {describe_error(failure)}", stderr=stderr)

    def error(self, error: BaseException) -> None:
        """Print ``error`` inside a red panel titled with its class name."""

        self.console().print(
            Panel(Text(describe_error(error)), title=type(error).__name__, border_style="red"),
        )


__all__ = [
    "Reporter",
    "StatusKind",
    "build_environment_table",
    "describe_error",
    "environments_json",
    "outcome_line",
    "stream_is_tty",
]
