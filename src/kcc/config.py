"""Run configuration for kcc.

Settings come from three layers, later ones winning:

1. built-in defaults (``/proc/config.gz`` for both the checked config and the
   reference vocabulary, in-process gzip, color on),
2. an optional ``kcc.toml`` found in the working directory or a parent,
3. command-line options.

Example ``kcc.toml``::

    [kcc]
    config = "/boot/config-6.8.0"
    reference = "/proc/config.gz"
    flags = ["required.flags"]
    list = ["BPF_SYSCALL,CGROUPS"]
    decompressor = "zcat"
    color = false
    check_reference = true

Relative paths are resolved against the directory holding ``kcc.toml``.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from kcc.errors import UsageError
from kcc.resolver import DEFAULT_REFERENCE_PATH
from kcc.source import DEFAULT_CONFIG_PATH

CONFIG_FILENAME = "kcc.toml"


@dataclass
class CheckerConfig:
    """Resolved settings for one kcc invocation."""

    config_path: Path = DEFAULT_CONFIG_PATH
    reference_path: Path = DEFAULT_REFERENCE_PATH
    flag_files: List[Path] = field(default_factory=list)
    inline_flags: List[str] = field(default_factory=list)
    # Read inline lists before flag files (--list came first on the command line)
    inline_first: bool = False
    use_reference: bool = True
    decompressor: str = "gzip"
    color: bool = True

    # Where the settings file was found, if any
    source: Optional[Path] = None

    def merged(self, **overrides: Any) -> CheckerConfig:
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)

    def with_flag_sources(
        self, flag_files: List[Path], inline_flags: List[str], *, inline_first: bool = False
    ) -> CheckerConfig:
        """Return a copy whose flag sources are exactly the given ones.

        Both lists are replaced together, so command-line flags never mix
        with the ``flags`` / ``list`` entries of ``kcc.toml``.  Two empty
        lists keep the file's sources.
        """
        if not flag_files and not inline_flags:
            return self
        return replace(
            self,
            flag_files=list(flag_files),
            inline_flags=list(inline_flags),
            inline_first=inline_first,
        )


def _find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Walk up from *start* (or cwd) looking for ``kcc.toml``."""
    candidate = (start or Path.cwd()).resolve()
    while True:
        path = candidate / CONFIG_FILENAME
        if path.is_file():
            return path
        if candidate == candidate.parent:
            return None
        candidate = candidate.parent


def _resolve(root: Path, rel: str) -> Path:
    """Resolve a path relative to the settings file directory."""
    p = Path(rel)
    if p.is_absolute():
        return p
    return root / p


def _expect(section: dict, key: str, kind: type, path: Path) -> Any:
    value = section[key]
    if not isinstance(value, kind):
        raise UsageError(f"{path}: '{key}' must be of type {kind.__name__}")
    return value


def _expect_str_list(section: dict, key: str, path: Path) -> List[str]:
    value = section[key]
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise UsageError(f"{path}: '{key}' must be a string or a list of strings")
    return value


def load_config(root: Optional[Path] = None) -> CheckerConfig:
    """Load defaults merged with the nearest ``kcc.toml``.

    Args:
        root: Directory to start searching from.  Defaults to the cwd.
    """
    cfg = CheckerConfig()
    if os.environ.get("NO_COLOR"):
        cfg.color = False

    path = _find_config_file(root)
    if path is None:
        return cfg

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise UsageError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise UsageError(f"Cannot read {path}: {e}") from e

    section = raw.get("kcc", {})
    if not isinstance(section, dict):
        raise UsageError(f"{path}: [kcc] must be a table")
    base = path.parent
    cfg.source = path

    if "config" in section:
        cfg.config_path = _resolve(base, _expect(section, "config", str, path))
    if "reference" in section:
        cfg.reference_path = _resolve(base, _expect(section, "reference", str, path))
    if "flags" in section:
        cfg.flag_files = [_resolve(base, p) for p in _expect_str_list(section, "flags", path)]
    if "list" in section:
        cfg.inline_flags = _expect_str_list(section, "list", path)
    if "check_reference" in section:
        cfg.use_reference = _expect(section, "check_reference", bool, path)
    if "decompressor" in section:
        cfg.decompressor = _expect(section, "decompressor", str, path)
    if "color" in section:
        cfg.color = cfg.color and _expect(section, "color", bool, path)

    return cfg
