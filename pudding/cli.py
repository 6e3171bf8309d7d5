#!/usr/bin/env python3
"""Command line entry point for pudding."""

import logging
from contextlib import nullcontext
from pathlib import Path

import click
from click.core import ParameterSource
from pydantic import ValidationError
from rich.logging import RichHandler
from rich.markup import escape

from pudding.backup import TargetBackup
from pudding.config import (
    DEFAULT_PATCH_FILE,
    DEFAULT_SEPARATOR,
    PATCH_SUFFIX,
    Operation,
    PatchConfig,
)
from pudding.console import Console
from pudding.patch import LinePatcher

HELP_TEXT = """Patch some lines to an existing text file, with the ability to undo the patch.

Every appended line carries a trailing "<comment> pudding|..." tag so it can be
found and removed again later.

\b
The name of a patch file ends with .patch and defaults to patch.patch.
"""

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def split_paths(paths: tuple[str, ...]) -> tuple[str | None, str | None, list[str]]:
    """Sort bare arguments into (patch file, target file, extras).

    The first argument ending in .patch is the patch file, the first other one
    is the target. Anything after that is left over.
    """
    patch_file = None
    target_file = None
    extras = []

    for arg in paths:
        if patch_file is None and arg.endswith(PATCH_SUFFIX):
            patch_file = arg
        elif target_file is None:
            target_file = arg
        else:
            extras.append(arg)

    return patch_file, target_file, extras


def setup_logging(console: Console, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console.stderr, show_time=False, show_path=False)],
        force=True,
    )


def run_operation(config: PatchConfig, patcher: LinePatcher) -> str:
    """Run the configured operation and describe what changed."""
    if config.operation == Operation.PATCH:
        count = patcher.patch(config.patch_file, config.target_file)
        return f"Appended {count} tagged line(s)"
    if config.operation == Operation.UNPATCH:
        count = patcher.unpatch(config.patch_file, config.target_file)
    else:
        count = patcher.unpatch_all(config.target_file)
    return f"Removed {count} tagged line(s)"


def print_config(console: Console, config: PatchConfig) -> None:
    console.print(
        "\n".join(
            [
                "",
                f"op:             {config.operation.value}",
                f"safe mode:      {config.safe}",
                f"comment symbol: {escape(config.sep)}",
                f"patch file:     {escape(str(config.patch_file))}",
                f"target file:    {escape(str(config.target_file))}",
                "",
            ]
        )
    )


@click.command(name="pudding", help=HELP_TEXT, context_settings=CONTEXT_SETTINGS)
@click.option("-u", "unpatch", is_flag=True, help="Do unpatch instead of patch.")
@click.option(
    "-U",
    "unpatch_all",
    is_flag=True,
    help="Remove ALL lines patched by this tool; the patch file can be omitted.",
)
@click.option(
    "-s", "safe", is_flag=True, help="Safe mode, back up the target file as <target>.bak."
)
@click.option(
    "-c",
    "sep",
    metavar="SEP",
    envvar="PUDDING_COMMENT",
    show_envvar=True,
    help=f"Comment symbol used by the target file, defaults to {DEFAULT_SEPARATOR}",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to stderr.")
@click.argument("paths", nargs=-1, metavar="[PATCH] TARGET")
@click.pass_context
def main(
    ctx: click.Context,
    unpatch: bool,
    unpatch_all: bool,
    safe: bool,
    sep: str | None,
    verbose: bool,
    paths: tuple[str, ...],
):
    console = Console()

    no_options = not (unpatch or unpatch_all or safe or verbose) and (
        ctx.get_parameter_source("sep") != ParameterSource.COMMANDLINE
    )
    if no_options and (not paths or paths == ("/?",)):
        click.echo(ctx.get_help())
        return

    setup_logging(console, verbose)

    if unpatch and unpatch_all:
        raise click.UsageError("-u and -U cannot be used together")

    operation = Operation.PATCH
    if unpatch:
        operation = Operation.UNPATCH
    elif unpatch_all:
        operation = Operation.UNPATCH_ALL

    patch_file, target_file, extras = split_paths(paths)
    for arg in extras:
        console.warn(f"unexpected argument {arg}")
    if operation == Operation.UNPATCH_ALL and patch_file is not None:
        console.warn("patch file will be ignored in -U mode")

    try:
        config = PatchConfig(
            operation=operation,
            safe=safe,
            sep=sep if sep is not None else DEFAULT_SEPARATOR,
            patch_file=Path(patch_file or DEFAULT_PATCH_FILE),
            target_file=Path(target_file) if target_file else None,
        )
    except ValidationError as e:
        raise click.UsageError("; ".join(err["msg"] for err in e.errors())) from e

    errors = config.validate_paths()
    if errors:
        raise click.ClickException("\n".join(errors))

    print_config(console, config)
    patcher = LinePatcher(config.sep)

    try:
        guard = nullcontext()
        if config.safe:
            guard = TargetBackup(target=config.target_file)
            console.print(
                f"Copying {escape(str(config.target_file))} to {escape(str(guard.backup_path))}"
            )

        with guard:
            console.print("Patching..." if operation == Operation.PATCH else "Unpatching...")
            summary = run_operation(config, patcher)
    except OSError as e:
        raise click.ClickException(str(e)) from e

    console.print(summary)
    console.print("Done.")


if __name__ == "__main__":
    main()
