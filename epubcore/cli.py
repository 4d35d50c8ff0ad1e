"""Command-line interface for epubcore."""
from __future__ import annotations

import logging
from pathlib import Path

import click

from .errors import EpubError
from .models import Document, Image
from .package import open_package
from .source import list_packages

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

preload_option = click.option(
    "--preload/--lazy",
    default=False,
    envvar="EPUBCORE_PRELOAD",
    help="Decode every item when opening instead of on first access.",
)


def _open(source: str, preload: bool):
    try:
        return open_package(source, preload=preload)
    except EpubError as e:
        raise click.ClickException(f"[{e.kind}] {e}") from e


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug messages.")
def cli(verbose: bool):
    """Inspect and read EPUB packages."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command("list", help="List the packages directly inside DIRECTORY.")
@click.argument("directory")
def list_cmd(directory: str):
    try:
        sources = list_packages(directory)
    except EpubError as e:
        raise click.ClickException(f"[{e.kind}] {e}") from e
    for src in sources:
        click.echo(src.value)


@cli.command("info", help="Show the reading order and manifest of SOURCE.")
@click.argument("source")
@preload_option
def info(source: str, preload: bool):
    with _open(source, preload) as book:
        click.echo(f"package document: {book.path}")
        click.echo(f"reading order: {book.reading_order_length()} entries")
        click.echo(f"manifest: {len(book.manifest)} items")
        for item in book.manifest:
            click.echo(f"  {item.id:<20} {item.strategy.value:<12} {item.media_type.essence:<28} {item.href}")
        for err in book.rejected:
            click.echo(f"skipped: {err}")


@cli.command("read", help="Print the item at reading-order INDEX (or --href) of SOURCE.")
@click.argument("source")
@click.argument("index", type=int, required=False)
@click.option("--href", help="Read by manifest href instead of reading-order index.")
@click.option("-o", "--output", type=click.Path(dir_okay=False, writable=True, path_type=Path), help="Write content to a file.")
@preload_option
def read(source: str, index: int | None, href: str | None, output: Path | None, preload: bool):
    if (index is None) == (href is None):
        raise click.UsageError("give exactly one of INDEX or --href")
    with _open(source, preload) as book:
        try:
            content = book.read_by_index(index) if href is None else book.read_by_href(href)
        except EpubError as e:
            raise click.ClickException(f"[{e.kind}] {e}") from e

        if isinstance(content, Document):
            data = content.text.encode("utf-8")
        elif isinstance(content, Image):
            data = content.data
        else:
            raise click.ClickException(
                f"[unsupported] {content.item.id} has media type {content.item.media_type.essence}; nothing to read"
            )

    if output is not None:
        output.write_bytes(data)
        click.echo(f"wrote {len(data)} bytes to {output}")
    elif isinstance(content, Document):
        click.echo(content.text, nl=False)
    else:
        click.get_binary_stream("stdout").write(data)


@cli.command("serve", help="Serve SOURCE over HTTP.")
@click.argument("source")
@click.option("--host", default="127.0.0.1")
@click.option("--port", default=5000, type=int)
@click.option("--debug/--no-debug", default=False)
@preload_option
def serve(source: str, host: str, port: int, debug: bool, preload: bool):
    from .web import create_app

    try:
        app = create_app(source, preload=preload)
    except EpubError as e:
        raise click.ClickException(f"[{e.kind}] {e}") from e
    click.echo(f"* Serving {source} on http://{host}:{port} (debug={debug})")
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":  # pragma: no cover
    cli()
