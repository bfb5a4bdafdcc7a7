"""Command line interface for inspecting and editing a working directory."""

from __future__ import annotations

import asyncio
import difflib
import sys
from pathlib import Path
from typing import Any, Awaitable, TypeVar

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from workdir.config import ConfigError, ConfigManager, WorkdirConfig, resolve_with_precedence
from workdir.errors import SaveError, WorkdirError
from workdir.logging_setup import configure_logging
from workdir.models import listing_payload
from workdir.working import WorkingDirectory

console = Console()

T = TypeVar("T")

_DIRECTORY = click.Path(exists=True, file_okay=False, path_type=str)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Raises:
        SystemExit: When emitting JSON output.
        click.ClickException: For non-JSON output.
    """
    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    raise click.ClickException(message) from original


def _run(coro: Awaitable[T], *, json_output: bool = False) -> T:
    """Run an operation to completion, mapping failures to CLI errors."""
    try:
        return asyncio.run(coro)  # type: ignore[arg-type]
    except SaveError as exc:
        details: dict[str, Any] = {"restored": exc.restored}
        if exc.restore_error is not None:
            details["restore_error"] = str(exc.restore_error)
        _handle_cli_error(
            str(exc), code="save_failed", json_output=json_output, details=details, original=exc
        )
    except WorkdirError as exc:
        _handle_cli_error(str(exc), code="workdir_error", json_output=json_output, original=exc)
    except OSError as exc:
        _handle_cli_error(
            f"{exc.strerror or exc}: {exc.filename}" if exc.filename else str(exc),
            code="filesystem_error",
            json_output=json_output,
            original=exc,
        )
    raise AssertionError("unreachable")  # pragma: no cover


def _working_directory(ctx: click.Context, path: str) -> WorkingDirectory:
    config: WorkdirConfig = ctx.obj["config"]
    try:
        return WorkingDirectory.from_config(Path(path), config)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="workdir")
@click.option("--log-level", type=str, help="Override the configured logging level.")
@click.option(
    "--text-size-limit",
    type=int,
    help="Largest text file, in bytes, whose content is loaded.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, text_size_limit: int | None) -> None:
    """Inspect, classify, and safely edit the files of a working directory."""
    overrides: dict[str, Any] = {}
    if text_size_limit is not None:
        overrides["session.text_file_size_limit"] = text_size_limit
    if log_level:
        overrides["logging.level"] = log_level

    try:
        config = ConfigManager().load(cli_overrides=overrides)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    configure_logging(config.logging.level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command("ls")
@click.argument("path", type=_DIRECTORY)
@click.option("--json", "json_output", is_flag=True, help="Emit the listing as JSON.")
@click.pass_context
def list_command(ctx: click.Context, path: str, json_output: bool) -> None:
    """List and classify the entries of PATH."""
    working = _working_directory(ctx, path)
    listing = _run(working.list_all(), json_output=json_output)

    if json_output:
        console.print_json(data=listing_payload(listing))
        return

    table = Table(title=str(working.root))
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Loaded")
    for name in sorted(listing):
        info = listing[name]
        kind = "text" if info.is_text else "binary"
        loaded = "yes" if info.loaded else "-"
        table.add_row(name, kind, loaded)
    console.print(table)


@cli.command("info")
@click.argument("path", type=_DIRECTORY)
@click.argument("name")
@click.pass_context
def info_command(ctx: click.Context, path: str, name: str) -> None:
    """Show how NAME inside PATH is classified."""
    working = _working_directory(ctx, path)
    info = _run(working.get_file_info(name), json_output=True)
    if info is None:
        console.print_json(data={"ignored": True})
        return
    console.print_json(data=info.payload())


@cli.command("save")
@click.argument("path", type=_DIRECTORY)
@click.argument("name")
@click.option(
    "--from-file",
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=str),
    help="Read new content from this file instead of standard input.",
)
@click.pass_context
def save_command(ctx: click.Context, path: str, name: str, source: str | None) -> None:
    """Overwrite NAME inside PATH, restoring the old content on failure."""
    working = _working_directory(ctx, path)
    if source is not None:
        content = Path(source).read_bytes()
    else:
        content = click.get_binary_stream("stdin").read()
    _run(working.save_file(name, content))
    console.print(f"[green]Saved {name} ({len(content)} bytes).[/green]")


@cli.command("mv")
@click.argument("path", type=_DIRECTORY)
@click.argument("old")
@click.argument("new")
@click.pass_context
def rename_command(ctx: click.Context, path: str, old: str, new: str) -> None:
    """Rename OLD to NEW inside PATH."""
    working = _working_directory(ctx, path)
    _run(working.rename_file(old, new))
    console.print(f"[green]Renamed {old} -> {new}.[/green]")


@cli.command("rm")
@click.argument("path", type=_DIRECTORY)
@click.argument("name")
@click.pass_context
def delete_command(ctx: click.Context, path: str, name: str) -> None:
    """Delete NAME from PATH."""
    working = _working_directory(ctx, path)
    _run(working.delete_file(name))
    console.print(f"[green]Deleted {name}.[/green]")


@cli.command("read")
@click.argument("path", type=_DIRECTORY)
@click.argument("name")
@click.pass_context
def read_command(ctx: click.Context, path: str, name: str) -> None:
    """Print NAME as base64 along with its MIME type."""
    working = _working_directory(ctx, path)
    data, mime_type = _run(working.read_binary(name), json_output=True)
    console.print_json(data={"mime": mime_type, "content": data})


@cli.group()
def config() -> None:
    """Manage workdir configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY."""
    manager = ConfigManager()
    manager.ensure_exists()

    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must be a dotted path such as 'session.max_concurrency'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    before = manager.read_text().splitlines()
    try:
        file_data = manager.load_file_overrides()
        _assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=WorkdirConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    if not diff:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def _assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    node = target
    for segment in path[:-1]:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise ConfigError(f"Cannot assign into non-mapping value at {segment}.")
        node = child
    node[path[-1]] = value


def main() -> None:
    """Console-script entry point."""
    cli(obj={})


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
