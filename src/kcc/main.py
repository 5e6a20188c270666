"""main.py – ``kcc`` command-line entry point.

Checks kernel config flags (default), lists only the failing ones
(``--missing`` / ``--incomplete``), or appends missing flags to a config
file (``--set``).

Usage::

    kcc -f required.flags
    kcc -c /boot/config-$(uname -r) -l BPF_SYSCALL,CGROUPS
    kcc -c .config -f required.flags --set
"""

from collections.abc import Sequence
from pathlib import Path

import typer

from kcc import __version__
from kcc.cli import error_exit, json_print
from kcc.config import CheckerConfig, load_config
from kcc.errors import KccError, UsageError
from kcc.flags import collect_flags
from kcc.mutator import MutationResult, apply_flags, write_config
from kcc.report import CheckReport, Reporter
from kcc.resolver import PermissiveVocabulary, ReferenceVocabulary, Vocabulary, resolve_flags
from kcc.source import Decompressor, get_decompressor, is_compressed, read_config_lines

_EPILOG = """\
[bold]Examples:[/bold]

kcc -f required.flags                      Check the running kernel

kcc -c /boot/config-6.8.0 -l BPF,CGROUPS   Check an installed config

kcc -f required.flags --missing            Print only the missing flags

kcc -c .config -f required.flags --set     Append missing flags as =y

[dim]Flags are accepted with or without the CONFIG_ prefix.  Names unknown to the
reference config (default /proc/config.gz) are reported as invalid options.
Settings may also be given in a kcc.toml file under a [kcc] table.[/dim]"""

app = typer.Typer(
    help="Check kernel configuration flags, or add missing ones.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
    add_completion=False,
)


def _requested_flags(settings: CheckerConfig) -> list[str]:
    flags = collect_flags(
        settings.flag_files, settings.inline_flags, inline_first=settings.inline_first
    )
    if not flags:
        raise UsageError("At least one flag must be specified with --flags or --list")
    return flags


def _flag_sources(settings: CheckerConfig) -> list[str]:
    files = [str(p) for p in settings.flag_files]
    if settings.inline_first:
        return list(settings.inline_flags) + files
    return files + list(settings.inline_flags)


def build_vocabulary(
    settings: CheckerConfig,
    decompressor: Decompressor,
    config_lines: Sequence[str] | None = None,
) -> Vocabulary:
    """Return the reference vocabulary for a read-only run.

    When the reference is the checked config itself, *config_lines* is
    reused instead of reading the file a second time.
    """
    if not settings.use_reference:
        return PermissiveVocabulary()
    if config_lines is not None and settings.reference_path == settings.config_path:
        return ReferenceVocabulary.from_lines(config_lines)
    return ReferenceVocabulary.from_path(settings.reference_path, decompressor)


def run_check(settings: CheckerConfig) -> CheckReport:
    """Resolve every requested flag against the configured kernel config."""
    flags = _requested_flags(settings)
    decompressor = get_decompressor(settings.decompressor)
    config_lines = read_config_lines(settings.config_path, decompressor)
    vocabulary = build_vocabulary(settings, decompressor, config_lines)
    return CheckReport(
        config_path=str(settings.config_path),
        results=resolve_flags(config_lines, flags, vocabulary),
    )


def run_set(settings: CheckerConfig) -> MutationResult:
    """Append missing requested flags to the config file and write it back."""
    if is_compressed(settings.config_path):
        raise UsageError(
            f"Cannot modify compressed config {settings.config_path}; "
            "pass an uncompressed file with --config"
        )
    flags = _requested_flags(settings)
    config_lines = read_config_lines(settings.config_path)
    result = apply_flags(config_lines, flags)
    write_config(settings.config_path, result)
    return result


_FLAG_ORDER_KEY = "kcc.flag_source_order"


def _record_flag_source(
    ctx: typer.Context, param: typer.CallbackParam, value: list | None
) -> list | None:
    # click runs callbacks in the order options first appear on the command line
    if value:
        ctx.meta.setdefault(_FLAG_ORDER_KEY, []).append(param.name)
    return value


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"kcc {__version__}")
        raise typer.Exit()


@app.command()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Kernel config to check (default: /proc/config.gz).",
    ),
    flags: list[Path] | None = typer.Option(
        None,
        "--flags",
        "-f",
        metavar="FILE",
        callback=_record_flag_source,
        help=(
            "File with kernel config flags, one per line. Repeatable. Files and --list "
            "values are grouped, and the option given first is read first."
        ),
    ),
    inline: list[str] | None = typer.Option(
        None,
        "--list",
        "-l",
        metavar="FLAGS",
        callback=_record_flag_source,
        help="Comma-separated flags, e.g. BPF_SYSCALL,CONFIG_CGROUPS. Repeatable.",
    ),
    reference: Path | None = typer.Option(
        None,
        "--reference",
        "-r",
        help="Config whose options count as valid (default: /proc/config.gz).",
    ),
    no_reference: bool = typer.Option(
        False, "--no-reference", help="Skip the invalid-option check."
    ),
    set_mode: bool = typer.Option(
        False, "--set", "-s", help="Append missing flags as CONFIG_X=y to the config file."
    ),
    missing: bool = typer.Option(False, "--missing", help="Print only missing flags."),
    incomplete: bool = typer.Option(
        False, "--incomplete", help="Print only flags that are not built in."
    ),
    no_color: bool = typer.Option(False, "--no-color", "-n", help="Disable colored output."),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
    zcat: bool = typer.Option(
        False, "--zcat", help="Decompress .gz configs with the external zcat tool."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Check that a kernel config enables the requested flags."""
    try:
        if sum((set_mode, missing, incomplete)) > 1:
            raise UsageError("--set, --missing and --incomplete are mutually exclusive")

        settings = load_config().merged(
            config_path=config,
            reference_path=reference,
            use_reference=False if no_reference else None,
            decompressor="zcat" if zcat else None,
            color=False if no_color else None,
        ).with_flag_sources(
            flags or [],
            inline or [],
            inline_first=ctx.meta.get(_FLAG_ORDER_KEY, ["flags"])[0] == "inline",
        )
        reporter = Reporter(color=settings.color)

        if set_mode:
            result = run_set(settings)
            if json_output:
                json_print(result.to_dict())
            else:
                reporter.mutation(result, settings.config_path)
            return

        report = run_check(settings)
    except KccError as e:
        error_exit(str(e), json_mode=json_output)

    if missing or incomplete:
        names = report.missing if missing else report.incomplete
        if json_output:
            json_print(names)
        else:
            reporter.names(names)
    elif json_output:
        json_print(report.to_dict())
    else:
        reporter.header(settings.config_path, _flag_sources(settings))
        reporter.check(report)

    if report.exit_code:
        raise typer.Exit(code=report.exit_code)


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
