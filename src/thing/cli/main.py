"""
Main CLI entry point for Thing.

Inspects YAML or JSON data files through a Thing container: the file is
read by a loader callback, an optional bulk filter is applied, and the
resulting data is printed.
"""

import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import click as _click
import rich.console as _rich_console
import rich.syntax as _rich_syntax
import yaml as _yaml

import thing
import thing.config as config
import thing.container as container
import thing.errors as errors

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _file_loader(path: _pathlib.Path) -> _typing.Callable[[], _typing.Any]:
    """Build a loader that parses ``path`` as YAML (JSON is valid YAML)."""

    def load() -> _typing.Any:
        return _yaml.safe_load(path.read_text(encoding="utf-8"))

    return load


def _open_thing(
    ctx: _click.Context,
    path: _pathlib.Path,
    filter_source: str | None = None,
) -> container.Thing:
    """Create and initialize a Thing for ``path``, exiting on load errors."""
    settings: config.Settings = ctx.obj["settings"]
    data = container.Thing(
        loader=_file_loader(path),
        filter=filter_source,
        settings=settings,
    )
    try:
        data.initialize()
    except _yaml.YAMLError as e:
        _click.echo(f"Error: cannot parse {path}: {e}", err=True)
        raise SystemExit(1) from None
    if not data.raw() and path.stat().st_size:
        _click.echo(f"Warning: {path} does not contain a mapping", err=True)
    return data


def _render(text: str, fmt: str, pretty: bool) -> None:
    if not pretty:
        _click.echo(text.rstrip("\n"))
        return
    console = _rich_console.Console()
    if fmt == "json":
        console.print_json(text)
    else:
        console.print(_rich_syntax.Syntax(text, "yaml"))


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(thing.__version__, "-v", "--version", prog_name="thing")
@_click.option("--verbose", is_flag=True, help="Enable debug logging")
@_click.pass_context
def cli(ctx: _click.Context, verbose: bool) -> None:
    """Thing - inspect data files through a lazy, filterable container."""
    if verbose:
        _logging.basicConfig(
            level=_logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )
    ctx.ensure_object(dict)
    ctx.obj["settings"] = config.Settings()


@cli.command()
@_click.argument(
    "path",
    type=_click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path),
)
@_click.option(
    "--filter",
    "filter_source",
    type=str,
    default=None,
    help="Bulk filter class path, e.g. 'mypkg.filters:Defaults'",
)
@_click.option("--key", "-k", type=str, default=None, help="Print only this top-level key")
@_click.option(
    "--format",
    "fmt",
    type=_click.Choice(["json", "yaml"]),
    default="json",
    help="Output format",
)
@_click.option("--indent", type=int, default=None, help="JSON indentation")
@_click.option("--pretty", is_flag=True, help="Syntax-highlight the output")
@_click.pass_context
def show(
    ctx: _click.Context,
    path: _pathlib.Path,
    filter_source: str | None,
    key: str | None,
    fmt: str,
    indent: int | None,
    pretty: bool,
) -> None:
    """Print the (filtered) contents of PATH."""
    data = _open_thing(ctx, path, filter_source)

    if key is not None:
        if not data.has(key):
            _click.echo(f"Error: key not found: {key}", err=True)
            raise SystemExit(1)
        value = data.get(key)
        if fmt == "json":
            text = _json.dumps(value, indent=indent, ensure_ascii=False)
        else:
            text = _yaml.safe_dump(value, default_flow_style=False, sort_keys=False, allow_unicode=True)
        _render(text, fmt, pretty)
        return

    try:
        text = data.to_json(indent=indent, ensure_ascii=False) if fmt == "json" else data.to_yaml()
    except errors.DepthExceededError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None
    _render(text, fmt, pretty)


@cli.command()
@_click.argument(
    "path",
    type=_click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path),
)
@_click.pass_context
def keys(ctx: _click.Context, path: _pathlib.Path) -> None:
    """List the top-level keys of PATH."""
    data = _open_thing(ctx, path)
    for key in data.keys():
        _click.echo(str(key))


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="thing")


if __name__ == "__main__":
    main()
