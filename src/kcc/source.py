"""source.py – Read kernel configuration text, decompressing when needed.

Kernel configs usually come from ``/proc/config.gz`` (gzip-compressed, needs
``CONFIG_IKCONFIG_PROC``) or from a plain ``/boot/config-*`` file.  Both are
handled by :func:`read_config_text`, which picks the path based on the file
extension.

Decompression is behind a one-method interface so the in-process ``gzip``
module, the external ``zcat`` tool, or a test fake can be swapped in::

    text = read_config_text(Path("/proc/config.gz"), ZcatDecompressor())
"""

from __future__ import annotations

import gzip
import shlex
import subprocess
import zlib
from pathlib import Path
from typing import Protocol

from kcc.errors import DecompressionError, NotFoundError, ReadError, UsageError

DEFAULT_CONFIG_PATH = Path("/proc/config.gz")

_COMPRESSED_SUFFIXES = {".gz"}


class Decompressor(Protocol):
    """Anything that turns compressed bytes into plain bytes."""

    def decompress(self, data: bytes) -> bytes: ...


class GzipDecompressor:
    """In-process gzip decompression using the standard library."""

    name = "gzip"

    def decompress(self, data: bytes) -> bytes:
        try:
            return gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as e:
            raise DecompressionError(f"gzip failed: {e}") from e


class ZcatDecompressor:
    """Decompression through an external ``zcat``-compatible command.

    The compressed bytes are fed on stdin; stdout is the result.  A missing
    executable or non-zero exit becomes :class:`DecompressionError` carrying
    the tool's stderr.
    """

    name = "zcat"

    def __init__(self, command: str = "zcat") -> None:
        self.command = command

    def decompress(self, data: bytes) -> bytes:
        argv = shlex.split(self.command)
        try:
            proc = subprocess.run(argv, input=data, capture_output=True, check=False)
        except (FileNotFoundError, OSError) as e:
            raise DecompressionError(f"Failed to run {self.command}: {e}") from e
        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            raise DecompressionError(
                f"{self.command} failed (exit {proc.returncode}): {stderr}"
            )
        return proc.stdout


_DECOMPRESSORS = {
    "gzip": GzipDecompressor,
    "zcat": ZcatDecompressor,
}


def get_decompressor(name: str) -> Decompressor:
    """Return a decompressor instance for a configured *name*."""
    try:
        return _DECOMPRESSORS[name]()
    except KeyError:
        known = ", ".join(sorted(_DECOMPRESSORS))
        raise UsageError(f"Unknown decompressor '{name}' (known: {known})") from None


def is_compressed(path: Path) -> bool:
    """True if the extension of *path* marks it as compressed."""
    return path.suffix in _COMPRESSED_SUFFIXES


def read_config_text(path: Path, decompressor: Decompressor | None = None) -> str:
    """Return the full (decompressed) text of the kernel config at *path*.

    Nothing is cached; every call reads the file again.

    Raises:
        NotFoundError: *path* does not exist.
        DecompressionError: the decompressor rejected the data.
        ReadError: I/O failure or the content is not valid UTF-8.
    """
    if not path.exists():
        raise NotFoundError(f"Config file not found: {path}")

    # Bytes, not read_text(): universal newlines would turn a lone \r into \n
    if not is_compressed(path):
        try:
            return path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(f"Failed to read config file {path}: {e}") from e

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ReadError(f"Failed to read config file {path}: {e}") from e

    if decompressor is None:
        decompressor = GzipDecompressor()
    data = decompressor.decompress(raw)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ReadError(f"Decompressed config {path} is not valid UTF-8: {e}") from e


def split_lines(text: str) -> list[str]:
    """Split *text* on ``\\n`` only, dropping one trailing ``\\r`` per line.

    Unlike :meth:`str.splitlines`, form feeds, ``\\x1c``-``\\x1e``, ``\\x85``
    and the Unicode separators stay inside the line, so a rewritten config
    keeps such bytes where they were.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def read_config_lines(path: Path, decompressor: Decompressor | None = None) -> list[str]:
    """Like :func:`read_config_text`, split with :func:`split_lines`."""
    return split_lines(read_config_text(path, decompressor))
