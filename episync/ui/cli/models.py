"""
CLI commands for Episerver model synchronization.

Thin wrappers over ``episync.core.services.model_sync``.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from episync.core.config.loader import ENVIRONMENTS, ConfigError, SyncConfig, load_config


_CONNECTION_OPTIONS = [
    click.option(
        "--env", "-e", "environment",
        type=click.Choice(ENVIRONMENTS),
        default="development",
        show_default=True,
        help="Environment whose .env files are loaded.",
    ),
    click.option("--domain", "-d", default=None, help="Episerver URL, overrides EPI_URL."),
    click.option("--insecure", "-i", is_flag=True, help="Skip TLS certificate checks."),
    click.option(
        "--root", "root_dir",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="SPA root directory (default: auto-detect).",
    ),
]


def _connection_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that talks to Episerver."""
    for option in reversed(_CONNECTION_OPTIONS):
        fn = option(fn)
    return fn


def _load(root_dir: Path | None, environment: str, insecure: bool, **overrides: Any) -> SyncConfig:
    if insecure:
        overrides["insecure"] = True
    try:
        return load_config(root_dir, environment, overrides=overrides)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


@click.group("models")
def models() -> None:
    """Models — mirror Episerver content types into TypeScript."""


@models.command("sync")
@_connection_options
@click.option("--model-dir", default=None, help="Output directory, overrides EPI_MODEL_PATH.")
@click.option("--workers", default=8, show_default=True, type=click.IntRange(1, 64), help="Parallel type fetches.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def sync(
    ctx: click.Context,
    environment: str,
    domain: str | None,
    insecure: bool,
    root_dir: Path | None,
    model_dir: str | None,
    workers: int,
    as_json: bool,
) -> None:
    """Generate model files and TypeMapper.ts, removing stale models."""
    from episync.core.services.model_sync import ModelSync

    config = _load(root_dir, environment, insecure, episerver_url=domain, model_dir=model_dir)
    report = ModelSync.from_config(config, max_workers=workers).run()

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(0 if report.ok else 1)

    if report.aborted:
        click.secho("❌ Synchronization aborted", fg="red", bold=True)
        for err in report.errors:
            click.echo(f"   • {err}")
        sys.exit(1)

    quiet = ctx.obj.get("quiet", False) if ctx.obj else False
    if not quiet:
        click.secho(f"\n🔄 Episerver models — {report.base_url}", fg="cyan", bold=True)
        click.echo(f"   Output: {report.model_path}")
        click.echo(f"   User:   {report.user or '(anonymous)'}")
        click.echo()

    for path in report.written:
        click.secho("   ✓ ", fg="green", nl=False)
        click.echo(Path(path).name)
    for name in report.removed:
        click.secho("   🗑 ", fg="yellow", nl=False)
        click.echo(name)
    for name in report.failed:
        click.secho(f"   ✗ {name}", fg="red")

    click.echo()
    color = {"ok": "green", "partial": "yellow"}.get(report.status, "red")
    click.secho(
        f"   Result: {len(report.written)}/{len(report.type_names)} models written",
        fg=color,
        bold=True,
    )
    if report.registry is None:
        click.secho("   TypeMapper.ts was not written", fg="red")

    if not report.ok:
        for err in report.errors:
            click.echo(f"   • {err}")
        click.echo()
        sys.exit(1)

    click.echo()


@models.command("list")
@_connection_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_types(
    environment: str,
    domain: str | None,
    insecure: bool,
    root_dir: Path | None,
    as_json: bool,
) -> None:
    """List the content types known to Episerver."""
    from episync.core.services.generators.naming import interface_name
    from episync.core.services.model_sync import ModelSync

    config = _load(root_dir, environment, insecure, episerver_url=domain)
    types = ModelSync.from_config(config).fetch_overview()

    if types is None:
        click.secho("❌ Unable to retrieve the content types", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([t.model_dump(by_alias=True) for t in types], indent=2))
        return

    click.secho(f"📋 {len(types)} content types", fg="cyan", bold=True)
    for t in types:
        label = f" — {t.display_name}" if t.display_name and t.display_name != t.name else ""
        click.echo(f"   • {t.name}{label}  → {interface_name(t.name)}")
