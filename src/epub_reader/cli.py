"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from epub_reader.core.errors import EpubError

app = typer.Typer(
    name="epub-reader",
    help="Read EPUB files: inspect structure, print chapters, search text.",
    add_completion=False,
)

console = Console()

BookArgument = Annotated[
    Path,
    typer.Argument(
        help="Path to the EPUB file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]

ChapterArgument = Annotated[
    int,
    typer.Argument(help="Chapter number as listed by 'epub-reader info'", min=1),
]


def _fail(e: Exception) -> None:
    if isinstance(e, EpubError) and e.path:
        console.print(f"[red]Error ({e.step}, {escape(e.path)}): {escape(e.message)}[/]")
    else:
        console.print(f"[red]Error: {escape(str(e))}[/]")
    raise typer.Exit(1)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Read EPUB files: inspect structure, print chapters, search text."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def info(book_path: BookArgument) -> None:
    """Display book metadata and chapter list."""
    try:
        from epub_reader.commands.info import execute_info

        execute_info(book_path=book_path, console=console)
    except EpubError as e:
        _fail(e)


@app.command()
def toc(book_path: BookArgument) -> None:
    """Display the table of contents mapped to chapters."""
    try:
        from epub_reader.commands.info import execute_toc

        execute_toc(book_path=book_path, console=console)
    except EpubError as e:
        _fail(e)


@app.command()
def chapter(
    book_path: BookArgument,
    number: ChapterArgument,
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format: markdown, text, or html",
        ),
    ] = "markdown",
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Print content only, without the title line",
        ),
    ] = False,
) -> None:
    """Print a chapter's sanitized content."""
    if output_format not in ("markdown", "text", "html"):
        console.print(
            f"[red]Invalid format: {output_format}. Use markdown, text, or html.[/]"
        )
        raise typer.Exit(1)

    try:
        from epub_reader.commands.read import execute_chapter

        execute_chapter(
            book_path=book_path,
            number=number,
            output_format=output_format,  # type: ignore
            quiet=quiet,
            console=console,
        )
    except EpubError as e:
        _fail(e)


@app.command()
def resources(book_path: BookArgument, number: ChapterArgument) -> None:
    """List images and stylesheets a chapter references."""
    try:
        from epub_reader.commands.read import execute_resources

        execute_resources(book_path=book_path, number=number, console=console)
    except EpubError as e:
        _fail(e)


@app.command()
def search(
    book_path: BookArgument,
    query: Annotated[str, typer.Argument(help="Text to search for (case-insensitive)")],
    limit: Annotated[
        Optional[int],
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of matches to display",
            min=1,
        ),
    ] = None,
) -> None:
    """Search the full text of every chapter."""
    try:
        from epub_reader.commands.search import execute_search

        execute_search(book_path=book_path, query=query, limit=limit, console=console)
    except EpubError as e:
        _fail(e)


if __name__ == "__main__":
    app()
