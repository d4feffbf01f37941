"""
episync — CLI entrypoint.

Usage:
    episync --help
    episync models sync -e production
    episync models list --json
    episync preload apply src/index.tsx --pattern "**/*.tsx" --extension .tsx
"""

from __future__ import annotations

import click

from episync import __version__
from episync.core.observability.logging_config import setup_from_environment


@click.group()
@click.version_option(version=__version__, prog_name="episync")
@click.option("--verbose", "-v", is_flag=True, help="Log sync progress.")
@click.option("--quiet", "-q", is_flag=True, help="Only print errors.")
@click.option("--debug", is_flag=True, help="Log every request and file (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """episync — Episerver model synchronization and @PreLoad rewriting."""
    ctx.ensure_object(dict)
    ctx.obj.update(verbose=verbose, quiet=quiet, debug=debug)
    setup_from_environment(debug=debug, verbose=verbose, quiet=quiet)


# ── Register sub-command groups from episync/ui/cli/ ──────────────

from episync.ui.cli.models import models  # noqa: E402
from episync.ui.cli.preload import preload  # noqa: E402

cli.add_command(models)
cli.add_command(preload)


if __name__ == "__main__":
    cli()
