"""literaltree command line interface."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from literaltree import __version__
from literaltree.ast_nodes import (
    ComplexNumberNode,
    KeyValueNode,
    Node,
    ScalarNode,
    SequenceNode,
    Tree,
)
from literaltree.config import LiteralTreeConfig, discover_config, load_config
from literaltree.errors import DecodeError, DiagnosticRenderer, FoldError, ParseError
from literaltree.formatter import render
from literaltree.objectify import fold
from literaltree.parser import decode, parse
from literaltree.source import SourceText

logger = logging.getLogger(__name__)


def _read_bytes(path: str) -> tuple[bytes, str]:
    if path == "-":
        return click.get_binary_stream("stdin").read(), "<stdin>"
    return Path(path).read_bytes(), path


def _parse_source(path: str, config: LiteralTreeConfig) -> tuple[Tree, SourceText] | None:
    """Decode and parse one input, reporting problems on stderr.

    Returns None when the input could not be parsed.
    """
    data, filename = _read_bytes(path)
    logger.info("parsing %s (%d bytes)", filename, len(data))

    limit = config.parser.max_length
    if limit is not None and len(data) > limit:
        click.echo(
            f"error: {filename}: input is {len(data)} bytes, limit is {limit}",
            err=True,
        )
        return None

    try:
        text = decode(data)
    except DecodeError as e:
        click.echo(f"error: {filename}: {e}", err=True)
        return None

    source = SourceText(text, filename)
    try:
        tree = parse(text, max_depth=config.parser.max_depth)
    except ParseError as e:
        renderer = DiagnosticRenderer(source, color=config.output.color)
        click.echo(renderer.render(e.to_diagnostic(source)), err=True)
        return None
    return tree, source


def _parse_or_exit(path: str, config: LiteralTreeConfig) -> tuple[Tree, SourceText]:
    parsed = _parse_source(path, config)
    if parsed is None:
        raise SystemExit(1)
    return parsed


@click.group()
@click.version_option(__version__, prog_name="literaltree")
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Use this literaltree.toml instead of searching for one.",
)
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.option("-v", "--verbose", is_flag=True, help="Log parser activity to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, no_color: bool, verbose: bool) -> None:
    """Parse and evaluate Python literal expressions."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    try:
        config = load_config(Path(config_path)) if config_path else discover_config()
    except ValueError as e:
        click.echo(f"error: invalid configuration: {e}", err=True)
        raise SystemExit(1)
    if no_color:
        config.output.color = False
    ctx.obj = config


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(allow_dash=True))
@click.pass_obj
def check(config: LiteralTreeConfig, paths: tuple[str, ...]) -> None:
    """Check that each file holds one valid literal expression."""
    had_errors = False
    for path in paths:
        if _parse_source(path, config) is None:
            had_errors = True
        else:
            click.echo(f"{'<stdin>' if path == '-' else path}: ok")
    if had_errors:
        raise SystemExit(1)


@main.command()
@click.argument("path", type=click.Path(allow_dash=True))
@click.pass_obj
def view(config: LiteralTreeConfig, path: str) -> None:
    """View the AST of a literal expression."""
    tree, _ = _parse_or_exit(path, config)
    _dump_ast(tree.root, 0)


@main.command(name="eval")
@click.argument("path", type=click.Path(allow_dash=True))
@click.pass_obj
def eval_cmd(config: LiteralTreeConfig, path: str) -> None:
    """Print the Python value of a literal expression."""
    tree, _ = _parse_or_exit(path, config)
    try:
        value = fold(tree)
    except FoldError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    text = repr(value)
    if config.output.color and click.get_text_stream("stdout").isatty():
        from literaltree.highlight import highlight

        click.echo(highlight(text), nl=False)
    else:
        click.echo(text)


@main.command(name="format")
@click.argument("path", type=click.Path(allow_dash=True))
@click.option("--check", is_flag=True, help="Check formatting without printing.")
@click.pass_obj
def format_cmd(config: LiteralTreeConfig, path: str, check: bool) -> None:
    """Print the canonical form of a literal expression."""
    tree, source = _parse_or_exit(path, config)
    formatted = render(tree)
    if check:
        if source.content.rstrip("\n") != formatted:
            click.echo(f"would reformat {source.filename}")
            raise SystemExit(1)
        return
    click.echo(formatted)


def _dump_ast(node: Node, depth: int) -> None:
    """Print a readable AST dump."""
    indent = "  " * depth
    name = type(node).__name__

    if isinstance(node, ScalarNode):
        click.echo(f"{indent}{name} {node.kind.value}: {node.value!r}")
    elif isinstance(node, ComplexNumberNode):
        click.echo(f"{indent}{name}: real={node.real!r} imaginary={node.imaginary!r}")
    elif isinstance(node, KeyValueNode):
        click.echo(f"{indent}{name}")
        click.echo(f"{indent}  key:")
        _dump_ast(node.key, depth + 2)
        click.echo(f"{indent}  value:")
        _dump_ast(node.value, depth + 2)
    elif isinstance(node, SequenceNode):
        if node.elements:
            click.echo(f"{indent}{name}")
            for element in node.elements:
                _dump_ast(element, depth + 1)
        else:
            click.echo(f"{indent}{name}: []")
    else:
        click.echo(f"{indent}{name}")
