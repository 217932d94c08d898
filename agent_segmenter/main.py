"""
agent-segmenter — split streamed AI coding-agent output into segments.

Command: agent-seg parse | stream | config
"""

import json
import sys
from typing import List

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import (
    CONFIG_FIELDS,
    MAX_CHUNK_SIZE,
    MIN_CHUNK_SIZE,
    OUTPUT_FORMATS,
    PROJECT_CONFIG_NAME,
    Config,
)
from .display import (
    get_icon,
    get_language_display_name,
    get_result_status_icon,
    get_result_status_style,
    get_tool_call_icon,
    set_use_unicode,
)
from .errors import SegmenterError
from .logger import setup_logger
from .parser import parse_message
from .segments import Segment, SegmentKind
from .stream import MessageStream

console = Console()

PREVIEW_CHARS = 96


def _compress_line(text: str, limit: int = PREVIEW_CHARS) -> str:
    compact = " ".join(text.strip().split())
    if len(compact) > limit:
        return compact[:limit - 3] + "..."
    return compact


def _describe(seg: Segment) -> Text:
    """One-line summary of the fields that matter for a segment's kind."""
    if seg.kind is SegmentKind.CODE:
        return Text(get_language_display_name(seg.language or ""))
    if seg.kind is SegmentKind.TOOL_SELECT:
        icon = get_tool_call_icon(seg.tool_action or "")
        return Text(f"{icon} {seg.tool_action} ({seg.tool_type.value})")
    if seg.kind is SegmentKind.TOOL_CALL:
        icon = get_tool_call_icon(seg.tool_action or "")
        return Text(f"{icon} {seg.tool_action} → {seg.tool_target} ({seg.tool_type.value})")
    if seg.kind is SegmentKind.TOOL_RESULT:
        status = seg.result_status
        return Text(
            f"{get_result_status_icon(status)} {status.value}",
            style=get_result_status_style(status),
        )
    return Text("")


def render_segments(segments: List[Segment], output_format: str) -> None:
    if output_format == "json":
        click.echo(json.dumps([seg.to_dict() for seg in segments], ensure_ascii=False, indent=2))
        return

    if output_format == "plain":
        for seg in segments:
            click.echo(f"[{seg.kind.value}] {_compress_line(seg.content)}")
        return

    if not segments:
        console.print(f"[dim]{escape(get_icon('📝'))} no segments[/dim]")
        return

    table = Table(show_header=True, header_style="bold", expand=False)
    table.add_column("#", justify="right", style="dim", no_wrap=True)
    table.add_column("Kind", no_wrap=True)
    table.add_column("Details")
    table.add_column("Content", overflow="fold")
    for index, seg in enumerate(segments, 1):
        table.add_row(str(index), seg.kind.value, _describe(seg), Text(_compress_line(seg.content)))
    console.print(table)


def _load_config(config_path, output_format, no_unicode, verbose) -> Config:
    config = Config.load(".", config_path=config_path)
    if output_format:
        config.output_format = output_format
    if no_unicode:
        config.use_unicode = False
    if verbose:
        config.verbose = True
    setup_logger(config)
    set_use_unicode(config.use_unicode)
    return config


_common_options = [
    click.option("--format", "-f", "output_format",
                 type=click.Choice(OUTPUT_FORMATS), default=None,
                 help="Output format"),
    click.option("--no-unicode", is_flag=True, help="ASCII icons only"),
    click.option("--config", "-c", "config_path", default=None, help="Config file path"),
    click.option("--verbose", "-v", is_flag=True, help="Verbose output"),
]


def common_options(func):
    for option in reversed(_common_options):
        func = option(func)
    return func


@click.group()
@click.version_option(__version__, prog_name="agent-seg")
def cli():
    """agent-segmenter — split streamed agent output into segments."""


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@common_options
def parse(source, output_format, no_unicode, config_path, verbose):
    """Parse a complete message (file or stdin) and print its segments."""
    try:
        config = _load_config(config_path, output_format, no_unicode, verbose)
    except SegmenterError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    segments = parse_message(source.read())
    render_segments(segments, config.output_format)


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--chunk-size", "-n", default=None,
              type=click.IntRange(MIN_CHUNK_SIZE, MAX_CHUNK_SIZE),
              help="Characters per replayed chunk")
@click.option("--check", is_flag=True,
              help="Verify incremental output against a full re-parse after every chunk")
@common_options
def stream(source, chunk_size, check, output_format, no_unicode, config_path, verbose):
    """Replay a message as a stream of chunks and print the final segments."""
    try:
        config = _load_config(config_path, output_format, no_unicode, verbose)
    except SegmenterError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    size = chunk_size or config.chunk_size
    text = source.read()
    message_stream = MessageStream(incremental=config.incremental or check)

    for start in range(0, len(text), size):
        segments = message_stream.feed(text[start:start + size])
        if check and segments != parse_message(message_stream.content):
            console.print(
                f"[red]Mismatch after {message_stream.chunk_count} chunks "
                f"({len(message_stream.content)} chars)[/red]"
            )
            sys.exit(1)
    message_stream.close()

    render_segments(message_stream.segments, config.output_format)
    if check:
        console.print(
            f"[green]{escape(get_icon('✅'))} incremental output matched full re-parse "
            f"for {message_stream.chunk_count} chunks[/green]"
        )


@cli.group(invoke_without_command=True)
@click.option("--config", "-c", "config_path", default=None, help="Config file path")
@click.pass_context
def config(ctx, config_path):
    """Show the effective configuration."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is not None:
        return
    try:
        cfg = Config.load(".", config_path=config_path)
    except SegmenterError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Key", no_wrap=True)
    table.add_column("Value", no_wrap=True)
    table.add_column("Description", style="dim")
    for key, setting in CONFIG_FIELDS.items():
        table.add_row(key, str(cfg.get_config_value(key)), setting.description)
    console.print(table)
    console.print(f"[dim]source: {cfg.summary()['source']}[/dim]")


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx, key, value):
    """Set KEY to VALUE and save it to the project config."""
    config_path = ctx.obj.get("config_path")
    try:
        cfg = Config.load(".", config_path=config_path)
    except SegmenterError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    ok, error = cfg.set_config_value(key, value)
    if not ok:
        console.print(f"[red]Error: {escape(key)}: {escape(error)}[/red]")
        sys.exit(1)
    cfg.save(config_path or PROJECT_CONFIG_NAME)
    console.print(f"[green]{escape(get_icon('✅'))} {key} = {cfg.get_config_value(key)}[/green]")


if __name__ == "__main__":
    cli()
