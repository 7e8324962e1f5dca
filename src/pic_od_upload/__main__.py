"""CLI entry point for pic-od-upload."""

from __future__ import annotations

import logging
import sys
from typing import Callable

import click
import yaml

from . import __version__
from .config import PicOdConfig, load_config, resolve_config_path, save_config
from .exceptions import ConfigError
from .insert import FileTarget, InsertionTarget, PasteTarget, default_target
from .notifications import DesktopNotifier, Notifier
from .pipeline import UploadOutcome, UploadStatus, upload_from_clipboard, upload_from_files


# ── Helpers ──────────────────────────────────────────────


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


def _load_effective_config(
    config_path: str | None, profile: str | None, template: str | None
) -> PicOdConfig:
    """Load config fresh for this command and apply one-off CLI overrides."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    overrides: dict[str, str] = {}
    if profile is not None:
        overrides["profile"] = profile
    if template is not None:
        overrides["url_template"] = template
    return config.model_copy(update=overrides) if overrides else config


def _build_target(
    into: str | None, line: int | None, column: int | None, paste: bool
) -> InsertionTarget | None:
    if into and paste:
        raise click.UsageError("--into and --paste cannot be combined")
    if (line is not None or column is not None) and not into:
        raise click.UsageError("--line/--column need --into FILE")
    if into:
        return FileTarget(into, line=line, column=column)
    if paste:
        return PasteTarget()
    return default_target()


def _build_notifier(config: PicOdConfig, explain: bool) -> Notifier:
    desktop = DesktopNotifier() if config.desktop_notifications else None
    return Notifier(desktop=desktop, explain=explain)


def _finish(outcome: UploadOutcome, into: str | None, notifier: Notifier) -> None:
    success = None
    if outcome.status == UploadStatus.INSERTED:
        success = f"Uploaded {len(outcome.results)} image(s)"
        if into:
            lines = len(outcome.text.splitlines())
            click.echo(f"Inserted {lines} line(s) into {into}", err=True)
    notifier.finish(success)
    if not outcome.ok:
        raise SystemExit(1)


def _insertion_options(func: Callable) -> Callable:
    """Options shared by the upload commands."""
    options = [
        click.option(
            "--into", default=None, help="Insert into this text file instead of printing"
        ),
        click.option(
            "--line",
            type=click.IntRange(min=1),
            default=None,
            help="1-based line for --into (default: end of file)",
        ),
        click.option(
            "--column",
            type=click.IntRange(min=1),
            default=None,
            help="1-based column for --into",
        ),
        click.option(
            "--paste", "-p", is_flag=True, help="Paste into the focused app instead"
        ),
        click.option("--profile", default=None, help="Override the pic-od profile"),
        click.option(
            "--template",
            default=None,
            help="Override the URL template (${fileName}, ${url})",
        ),
        click.option("--explain", is_flag=True, help="Explain errors and how to fix them"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


# ── CLI Commands ─────────────────────────────────────────


@click.group()
@click.version_option(version=__version__, prog_name="pic-od-upload")
@click.option("--config", "config_path", default=None, help="Config file path")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Upload images with pic-od and insert their URLs."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@main.command()
@_insertion_options
@click.pass_context
def clipboard(
    ctx: click.Context,
    into: str | None,
    line: int | None,
    column: int | None,
    paste: bool,
    profile: str | None,
    template: str | None,
    explain: bool,
) -> None:
    """Upload the image on the clipboard.

    Copy a screenshot, run this, and the formatted URL is printed (or
    inserted with --into / --paste).
    """
    target = _build_target(into, line, column, paste)
    config = _load_effective_config(ctx.obj["config_path"], profile, template)
    notifier = _build_notifier(config, explain)

    outcome = upload_from_clipboard(config, target, notifier)
    _finish(outcome, into, notifier)


@main.command()
@click.argument("paths", nargs=-1, type=click.Path(dir_okay=False))
@_insertion_options
@click.pass_context
def files(
    ctx: click.Context,
    paths: tuple[str, ...],
    into: str | None,
    line: int | None,
    column: int | None,
    paste: bool,
    profile: str | None,
    template: str | None,
    explain: bool,
) -> None:
    """Upload image files (png, jpg, jpeg, gif, webp, svg, bmp, ico).

    Without PATHS, asks for a comma-separated list.
    """
    target = _build_target(into, line, column, paste)
    selected = list(paths)
    if not selected:
        raw = click.prompt(
            "Images to upload (comma-separated)", default="", show_default=False
        )
        selected = [p.strip() for p in raw.split(",") if p.strip()]
    if not selected:
        click.echo("Nothing selected.", err=True)
        return

    config = _load_effective_config(ctx.obj["config_path"], profile, template)
    notifier = _build_notifier(config, explain)

    outcome = upload_from_files(selected, config, target, notifier)
    _finish(outcome, into, notifier)


@main.group("config")
def config_group() -> None:
    """Create or inspect the configuration file."""


@config_group.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Write a config file with the default settings."""
    path = resolve_config_path(ctx.obj["config_path"])
    if path.exists() and not force:
        click.echo(f"Config already exists: {path} (use --force to overwrite)")
        return
    save_config(PicOdConfig(), path)
    click.echo(f"Wrote {path}")


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the effective settings (file + env overrides)."""
    path = resolve_config_path(ctx.obj["config_path"])
    config = _load_effective_config(ctx.obj["config_path"], None, None)

    click.echo(f"Config file: {path} (exists={path.exists()})")
    click.echo("")
    click.echo(
        yaml.dump(config.model_dump(), default_flow_style=False, sort_keys=False).rstrip()
    )


@main.command()
@click.pass_context
def doctor(ctx: click.Context) -> None:
    """Run diagnostics: clipboard tools, pic-od binary, config."""
    import shutil
    from pathlib import Path

    from .platform import CLIPBOARD_TOOLS, PASTE_TOOLS, available_tools, get_platform

    checks: list[tuple[str, bool, str]] = []

    # 1. Python version
    ver = sys.version.split()[0]
    ok = sys.version_info >= (3, 10)
    checks.append(
        ("Python version", ok, f"{ver} {'(>= 3.10)' if ok else '(need >= 3.10)'}")
    )

    # 2. Platform
    plat = get_platform()
    checks.append(("Platform", plat != "unsupported", f"{plat} ({sys.platform})"))

    # 3. Clipboard tools (one is enough)
    tools = available_tools(CLIPBOARD_TOOLS.get(plat, ()))
    found = [name for name, present in tools.items() if present]
    checks.append(
        (
            "Clipboard image tools",
            bool(found),
            ", ".join(found) if found else f"none of {', '.join(tools) or '-'} found",
        )
    )

    # 4. Paste support (optional)
    paste_tools = available_tools(PASTE_TOOLS.get(plat, ()))
    missing = [name for name, present in paste_tools.items() if not present]
    checks.append(
        (
            "  --paste support",
            not missing,
            "ready" if not missing else f"{', '.join(missing)} not installed (optional)",
        )
    )

    # 5. Config file
    config_path = ctx.obj["config_path"]
    config_file = resolve_config_path(config_path)
    config = PicOdConfig()
    try:
        config = load_config(config_path)
        detail = str(config_file) if config_file.exists() else "not found, using defaults"
        checks.append(("Config file", True, detail))
    except ConfigError as e:
        checks.append(("Config file", False, f"invalid: {e}"))

    # 6. pic-od binary
    binary = config.binary_path
    resolved = shutil.which(binary) or (binary if Path(binary).is_file() else None)
    checks.append(
        ("pic-od binary", resolved is not None, resolved or f"'{binary}' not found on PATH")
    )

    # Print results
    click.echo("\npic-od-upload doctor")
    click.echo("=" * 50)

    passed = 0
    failed = 0
    for name, ok, detail in checks:
        icon = click.style("PASS", fg="green") if ok else click.style("FAIL", fg="red")
        # Don't count optional checks as failures
        is_optional = name.startswith("  ") and "(optional)" in detail
        if ok:
            passed += 1
        elif is_optional:
            icon = click.style("SKIP", fg="yellow")
        else:
            failed += 1
        click.echo(f"  [{icon}] {name}: {detail}")

    click.echo(f"\n  {passed} passed, {failed} failed")
    if failed == 0:
        click.echo(click.style("  All checks passed!", fg="green"))
    else:
        click.echo(
            click.style("  Some checks failed. See above for details.", fg="red")
        )
    click.echo("")
    if failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
