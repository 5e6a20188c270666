"""resolver.py – Classify requested flags against kernel config text.

Each flag gets exactly one :class:`FlagStatus`.  Before the checked config
is scanned, the flag must be known to a *reference vocabulary*, normally the
running kernel's ``/proc/config.gz``.  This lets an archived config be
checked while still telling "unset" apart from "no such option".
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from kcc.flags import canonical_flag_name, match_prefix
from kcc.source import DEFAULT_CONFIG_PATH, Decompressor, read_config_lines

DEFAULT_REFERENCE_PATH = DEFAULT_CONFIG_PATH


class FlagStatus(Enum):
    ENABLED_BUILTIN = "builtin"
    ENABLED_AS_MODULE = "module"
    MISSING = "missing"
    INVALID_OPTION = "invalid"

    @property
    def ok(self) -> bool:
        """True for the two enabled states."""
        return self in (FlagStatus.ENABLED_BUILTIN, FlagStatus.ENABLED_AS_MODULE)


@dataclass(frozen=True)
class FlagCheckResult:
    """Outcome of checking one requested flag."""

    name: str
    status: FlagStatus

    def to_dict(self) -> dict[str, str]:
        """Serialize to a plain dict for JSON output."""
        return {"name": self.name, "status": self.status.value}


class Vocabulary(Protocol):
    """Source of truth for which option names exist at all."""

    def recognizes(self, prefix: str) -> bool: ...


class ReferenceVocabulary:
    """Option names taken from a reference kernel config.

    A name is recognized when some line of the reference starts with its
    ``CONFIG_<name>=`` prefix.  ``# CONFIG_X is not set`` lines therefore do
    not count.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = list(lines)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> ReferenceVocabulary:
        return cls(lines)

    @classmethod
    def from_path(
        cls,
        path: Path = DEFAULT_REFERENCE_PATH,
        decompressor: Decompressor | None = None,
    ) -> ReferenceVocabulary:
        """Load the vocabulary from a (possibly compressed) config file."""
        return cls(read_config_lines(path, decompressor))

    def recognizes(self, prefix: str) -> bool:
        return any(line.startswith(prefix) for line in self._lines)


class PermissiveVocabulary:
    """Vocabulary that accepts every name (reference check disabled)."""

    def recognizes(self, prefix: str) -> bool:
        return True


def resolve_flag(
    config_lines: Sequence[str], raw_flag: str, vocabulary: Vocabulary
) -> FlagCheckResult:
    """Determine the status of *raw_flag* in *config_lines*.

    ``=y`` and ``=m`` lines decide the result; lines with any other value
    (strings, numbers) are skipped as if absent.
    """
    name = canonical_flag_name(raw_flag)
    prefix = match_prefix(raw_flag)

    if not vocabulary.recognizes(prefix):
        return FlagCheckResult(name=name, status=FlagStatus.INVALID_OPTION)

    for line in config_lines:
        if not line.startswith(prefix):
            continue
        value = line[len(prefix) :]
        if value == "y":
            return FlagCheckResult(name=name, status=FlagStatus.ENABLED_BUILTIN)
        if value == "m":
            return FlagCheckResult(name=name, status=FlagStatus.ENABLED_AS_MODULE)

    return FlagCheckResult(name=name, status=FlagStatus.MISSING)


def resolve_flags(
    config_lines: Sequence[str], raw_flags: Iterable[str], vocabulary: Vocabulary
) -> list[FlagCheckResult]:
    """Resolve every requested flag, keeping order and duplicates."""
    return [resolve_flag(config_lines, flag, vocabulary) for flag in raw_flags]
