"""Shared utilities for kcc."""

import contextlib
import os
import shutil
from pathlib import Path


def atomic_write_text(filepath: Path, text: str, encoding: str = "utf-8") -> None:
    """Replace the file behind *filepath* with *text* in one ``os.replace``.

    Symlinks are followed, so the link stays and its target is rewritten.
    An existing file's permission bits carry over to the new content.  On
    failure the temporary sibling is removed and the original is untouched.
    """
    target = filepath.resolve()
    tmp_path = target.with_name(target.name + ".tmp")
    try:
        tmp_path.write_text(text, encoding=encoding)
        if target.exists():
            shutil.copymode(target, tmp_path)
        os.replace(tmp_path, target)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise
