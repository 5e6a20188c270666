"""mutator.py – Append missing flags to a kernel config file.

Existing lines are never edited: a flag whose ``CONFIG_<name>=`` line is
already present keeps its value (``y``, ``m`` or anything else), and absent
flags are appended as ``CONFIG_<name>=y``.  Running the same request twice
leaves the file unchanged the second time.

Write mode does not consult the reference vocabulary, so unknown names are
appended too.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from kcc.errors import WriteError
from kcc.flags import canonical_flag_name, clean_flag_name, match_prefix
from kcc.utils import atomic_write_text


class MutationOutcome(Enum):
    ADDED = "added"
    ALREADY_PRESENT = "already_present"


@dataclass
class MutationResult:
    """Updated config lines plus what happened to each unique flag."""

    lines: list[str] = field(default_factory=list)
    outcomes: dict[str, MutationOutcome] = field(default_factory=dict)

    @property
    def added(self) -> list[str]:
        return [n for n, o in self.outcomes.items() if o is MutationOutcome.ADDED]

    @property
    def already_present(self) -> list[str]:
        return [n for n, o in self.outcomes.items() if o is MutationOutcome.ALREADY_PRESENT]

    def render(self) -> str:
        """Return the file content: lines joined by newlines, one trailing newline."""
        return "\n".join(self.lines) + "\n"

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict for JSON output."""
        return {
            "added": self.added,
            "already_present": self.already_present,
            "flags": [{"name": n, "outcome": o.value} for n, o in self.outcomes.items()],
        }


def unique_flags(raw_flags: Iterable[str]) -> list[str]:
    """Collapse *raw_flags* to one entry per clean name, first occurrence wins."""
    seen: set[str] = set()
    unique: list[str] = []
    for raw in raw_flags:
        clean = clean_flag_name(raw)
        if clean in seen:
            continue
        seen.add(clean)
        unique.append(raw)
    return unique


def apply_flags(config_lines: Sequence[str], wanted_flags: Iterable[str]) -> MutationResult:
    """Append ``CONFIG_<name>=y`` for every wanted flag without a line yet."""
    result = MutationResult(lines=list(config_lines))
    for raw in unique_flags(wanted_flags):
        name = canonical_flag_name(raw)
        prefix = match_prefix(raw)
        if any(line.startswith(prefix) for line in result.lines):
            result.outcomes[name] = MutationOutcome.ALREADY_PRESENT
        else:
            result.lines.append(f"{name}=y")
            result.outcomes[name] = MutationOutcome.ADDED
    return result


def write_config(path: Path, result: MutationResult) -> None:
    """Replace the config at *path* with the mutated text."""
    try:
        atomic_write_text(path, result.render())
    except OSError as e:
        raise WriteError(f"Failed to write config file {path}: {e}") from e
