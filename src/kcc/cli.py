"""Shared CLI helpers for kcc.

Standardised error and JSON output so every code path in :mod:`kcc.main`
reports failures the same way::

    from kcc.cli import error_exit, json_print

    try:
        ...
    except KccError as e:
        error_exit(str(e), json_mode=json_output)
"""

from __future__ import annotations

import json
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

_err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}")
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))
