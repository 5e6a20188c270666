"""flags.py – Flag-declaration parsing and flag-name normalization.

A flag file lists one kernel option per line::

    # networking
    BPF_SYSCALL
    CONFIG_CGROUPS
    NET_NS=y          # the value part is ignored

Blank lines and ``#`` comments are skipped, anything after the first ``=``
is dropped, and names are not validated here; unknown names are classified
later by the resolver.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from kcc.errors import NotFoundError, ReadError

CONFIG_PREFIX = "CONFIG_"


def clean_flag_name(raw: str) -> str:
    """Strip exactly one leading ``CONFIG_`` from *raw*."""
    if raw.startswith(CONFIG_PREFIX):
        return raw[len(CONFIG_PREFIX) :]
    return raw


def canonical_flag_name(raw: str) -> str:
    """Return the ``CONFIG_``-prefixed name used for matching and output."""
    return CONFIG_PREFIX + clean_flag_name(raw)


def match_prefix(raw: str) -> str:
    """Return the ``CONFIG_<name>=`` line prefix for *raw*."""
    return canonical_flag_name(raw) + "="


def parse_flag_line(line: str) -> str | None:
    """Return the flag name declared on *line*, or None for blanks/comments."""
    trimmed = line.strip()
    if not trimmed or trimmed.startswith("#"):
        return None
    if "=" in trimmed:
        return trimmed.split("=", 1)[0]
    return trimmed


def parse_flag_lines(text: str) -> list[str]:
    """Parse the content of a flag file into raw flag names, in order."""
    flags: list[str] = []
    for line in text.splitlines():
        name = parse_flag_line(line)
        if name is not None:
            flags.append(name)
    return flags


def read_flags_file(path: Path) -> list[str]:
    """Read and parse a flag-declaration file."""
    if not path.exists():
        raise NotFoundError(f"Flags file not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(f"Failed to read flags file {path}: {e}") from e
    return parse_flag_lines(content)


def parse_inline_flags(value: str) -> list[str]:
    """Parse a comma-separated flag list; each token is one flag-file line."""
    flags: list[str] = []
    for token in value.split(","):
        name = parse_flag_line(token)
        if name is not None:
            flags.append(name)
    return flags


def collect_flags(
    flag_files: Iterable[Path],
    inline_lists: Iterable[str] = (),
    *,
    inline_first: bool = False,
) -> list[str]:
    """Gather requested flags from all files and all inline lists.

    Files come first unless *inline_first* is set.  Within each group the
    given order is kept, and duplicates are not removed.
    """
    from_files: list[str] = []
    for path in flag_files:
        from_files.extend(read_flags_file(path))
    from_inline: list[str] = []
    for value in inline_lists:
        from_inline.extend(parse_inline_flags(value))
    if inline_first:
        return from_inline + from_files
    return from_files + from_inline
