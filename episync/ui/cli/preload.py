"""
CLI commands for the @PreLoad rewriter.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from episync.core.errors import EpisyncError


@click.group("preload")
def preload() -> None:
    """PreLoad — replace @PreLoad annotations with static imports."""


@preload.command("apply")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--pattern", required=True, help="Glob of files to preload, e.g. '*.tsx'.")
@click.option("--extension", required=True, help="Extension stripped from module names, e.g. '.tsx'.")
@click.option("--exclude", default=None, help="Additional glob of files to skip.")
@click.option("--in-place", is_flag=True, help="Rewrite SOURCE instead of printing the result.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def apply(
    source: Path,
    pattern: str,
    extension: str,
    exclude: str | None,
    in_place: bool,
    as_json: bool,
) -> None:
    """Rewrite the @PreLoad annotation in SOURCE."""
    from episync.core.services.loaders import LoaderContext, preload_loader

    options = {"pattern": pattern, "extension": extension}
    if exclude:
        options["exclude"] = exclude

    text = source.read_text(encoding="utf-8")
    try:
        result = preload_loader(text, LoaderContext.for_file(source, options))
    except EpisyncError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    changed = result != text
    if in_place and changed:
        source.write_text(result, encoding="utf-8")

    if as_json:
        click.echo(json.dumps({
            "source": str(source),
            "changed": changed,
            "written": in_place and changed,
            "content": None if in_place else result,
        }, indent=2))
        return

    if in_place:
        if changed:
            click.secho(f"✅ Rewrote {source}", fg="green")
        else:
            click.echo(f"No @PreLoad annotation in {source}")
        return

    click.echo(result, nl=False)
