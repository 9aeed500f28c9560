"""Chapter and resources command implementations."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from epub_reader.commands.info import chapter_titles
from epub_reader.core.content_processor import ContentProcessor, OutputFormat
from epub_reader.core.package import Package
from epub_reader.core.paths import is_external


def execute_chapter(
    book_path: Path,
    number: int,
    output_format: OutputFormat,
    quiet: bool,
    console: Console,
) -> None:
    """Print one chapter. ``number`` is 1-based as shown by ``info``."""
    with Package.from_path(book_path) as package:
        index = number - 1
        markup = package.load_chapter(index)
        processor = ContentProcessor()
        content = processor.process(markup, output_format)

        if not quiet:
            title = chapter_titles(package)[index]
            console.print(
                f"[bold cyan]{escape(title)}[/] [dim]({escape(package.chapters[index].path)})[/]"
            )
            console.print()

        console.print(content, markup=False, highlight=False)

        if not quiet:
            stats = processor.get_stats(content)
            console.print()
            console.print(
                f"[dim]{stats['word_count']:,} words, {stats['paragraph_count']} paragraphs[/]"
            )


def execute_resources(book_path: Path, number: int, console: Console) -> None:
    """List resources referenced by a chapter and whether the archive has them."""
    with Package.from_path(book_path) as package:
        refs = package.resources(number - 1)
        if not refs:
            console.print("[dim]No images or stylesheets referenced[/]")
            return

        table = Table(title="Resources", show_header=True, header_style="bold cyan")
        table.add_column("Kind", style="white")
        table.add_column("Reference", style="dim")
        table.add_column("Resolved Path", style="white")
        table.add_column("Status", justify="center")

        for ref in refs:
            if is_external(ref.path):
                status = "[blue]external[/]"
            elif package.archive.has(ref.path):
                status = "[green]found[/]"
            else:
                status = "[red]missing[/]"
            table.add_row(ref.kind, escape(ref.reference), escape(ref.path), status)

        console.print(table)
