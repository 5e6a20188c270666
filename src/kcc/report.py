"""report.py – Console rendering and exit-code policy for check results.

Color is an explicit :class:`Reporter` setting; nothing here touches global
terminal state.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from kcc.mutator import MutationOutcome, MutationResult
from kcc.resolver import FlagCheckResult, FlagStatus

_STATUS_ICONS = {
    FlagStatus.ENABLED_BUILTIN: "✅",
    FlagStatus.ENABLED_AS_MODULE: "✅",
    FlagStatus.MISSING: "❌",
    FlagStatus.INVALID_OPTION: "⚠️",
}

_STATUS_STYLES = {
    FlagStatus.ENABLED_BUILTIN: "green",
    FlagStatus.ENABLED_AS_MODULE: "green",
    FlagStatus.MISSING: "red",
    FlagStatus.INVALID_OPTION: "yellow",
}

_STATUS_SUFFIX = {
    FlagStatus.ENABLED_AS_MODULE: " (as module)",
    FlagStatus.INVALID_OPTION: " (invalid option)",
}


def _unique(names: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(names))


@dataclass
class CheckReport:
    """All results of a read-only run, in request order."""

    config_path: str = ""
    results: list[FlagCheckResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True if every flag is built in or a module."""
        return all(r.status.ok for r in self.results)

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    @property
    def missing(self) -> list[str]:
        """Unique missing flag names, first-seen order."""
        return _unique([r.name for r in self.results if r.status is FlagStatus.MISSING])

    @property
    def invalid(self) -> list[str]:
        """Unique flag names unknown to the reference vocabulary."""
        return _unique([r.name for r in self.results if r.status is FlagStatus.INVALID_OPTION])

    @property
    def incomplete(self) -> list[str]:
        """Unique flag names that are not built into the kernel image."""
        return _unique(
            [r.name for r in self.results if r.status is not FlagStatus.ENABLED_BUILTIN]
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {
            "config": self.config_path,
            "passed": self.passed,
            "results": [r.to_dict() for r in self.results],
            "missing": self.missing,
            "invalid": self.invalid,
        }


class Reporter:
    """Prints check and mutation reports to a rich console."""

    def __init__(self, console: Console | None = None, *, color: bool = True) -> None:
        if console is None:
            console = Console(no_color=not color, highlight=False, emoji=False, soft_wrap=True)
        self.console = console

    def format_result(self, result: FlagCheckResult) -> str:
        """Return the rich markup line for one result."""
        icon = _STATUS_ICONS[result.status]
        style = _STATUS_STYLES[result.status]
        suffix = _STATUS_SUFFIX.get(result.status, "")
        return f"{icon} [{style}]{escape(result.name)}[/{style}]{suffix}"

    def header(self, config_path: Path | str, sources: Sequence[str]) -> None:
        self.console.print(
            f"\U0001f50d Kernel Config Checker - Checking kernel configuration flags from: "
            f"{escape(str(config_path))}"
        )
        if sources:
            self.console.print(f"\U0001f4cb Reading flags from: {escape(', '.join(sources))}")
        self.console.print()

    def check(self, report: CheckReport) -> None:
        """Print every result, the summary, then the unique failures."""
        for result in report.results:
            self.console.print(self.format_result(result))

        self.console.print()
        if report.passed:
            self.console.print("✅ All required kernel flags are enabled!")
            return
        self.console.print("❌ Some required kernel flags are missing!")

        if report.missing:
            self.console.print()
            self.console.print("[red]Missing flags:[/red]")
            for name in report.missing:
                self.console.print(f"  {escape(name)}")
        if report.invalid:
            self.console.print()
            self.console.print("[yellow]Invalid options (unknown to the reference kernel):[/yellow]")
            for name in report.invalid:
                self.console.print(f"  {escape(name)}")

    def names(self, names: Sequence[str]) -> None:
        """Print bare flag names, one per line."""
        for name in names:
            self.console.print(escape(name))

    def mutation(self, result: MutationResult, config_path: Path | str) -> None:
        """Print per-flag outcomes and the final counts of a ``--set`` run."""
        for name, outcome in result.outcomes.items():
            if outcome is MutationOutcome.ADDED:
                self.console.print(f"[green]ADDED[/green] {escape(name)}")
            else:
                self.console.print(f"[dim]{escape(name)} already exists[/dim]")

        self.console.print()
        self.console.print(
            f"Added {len(result.added)} flag(s), "
            f"{len(result.already_present)} already present in {escape(str(config_path))}."
        )
