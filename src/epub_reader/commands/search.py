"""Search command implementation."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from epub_reader.commands.info import chapter_titles
from epub_reader.core.package import Package
from epub_reader.models.content import SearchHit


def snippet(text: str, hit: SearchHit, length: int, context: int = 30) -> str:
    """Text around a hit on one line."""
    start = max(0, hit.offset - context)
    end = min(len(text), hit.offset + length + context)
    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(text) else ""
    return prefix + " ".join(text[start:end].split()) + suffix


def execute_search(
    book_path: Path,
    query: str,
    limit: int | None,
    console: Console,
) -> None:
    """Search all chapters and print matches with context."""
    with Package.from_path(book_path) as package:
        package.load_all()
        hits = package.search(query)

        if not hits:
            console.print(f"[yellow]No results for '{escape(query)}'[/]")
            return

        titles = chapter_titles(package)
        shown = hits[:limit] if limit else hits

        table = Table(
            title=f"Results for '{escape(query)}'", show_header=True, header_style="bold cyan"
        )
        table.add_column("Chapter", style="white")
        table.add_column("Offset", justify="right", style="dim")
        table.add_column("Context", style="white")

        for hit in shown:
            text = package.plain_text(hit.chapter_index) or ""
            table.add_row(
                escape(f"{hit.chapter_index + 1}. {titles[hit.chapter_index]}"),
                str(hit.offset),
                escape(snippet(text, hit, len(query))),
            )

        console.print(table)
        if len(shown) < len(hits):
            console.print(f"[dim]Showing {len(shown)} of {len(hits)} matches[/]")
        else:
            console.print(f"[green]{len(hits)} match(es)[/]")
