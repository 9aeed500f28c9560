"""Info and toc command implementations."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from epub_reader.core.package import Package


def chapter_titles(package: Package) -> dict[int, str]:
    """Map chapter indices to display titles.

    The first navigation entry pointing at a chapter names it; chapters no
    entry points at get the synthetic title.
    """
    titles: dict[int, str] = {}
    for entry in package.toc():
        if entry.title and entry.chapter_index not in titles:
            titles[entry.chapter_index] = entry.title
    for chapter in package.chapters:
        titles.setdefault(
            chapter.index,
            package.config.synthetic_title_template.format(number=chapter.index + 1),
        )
    return titles


def execute_info(book_path: Path, console: Console) -> None:
    """Display book metadata and the chapter list."""
    with Package.from_path(book_path) as package:
        loaded = package.load_all()
        titles = chapter_titles(package)
        metadata = package.metadata

        nav_display = (
            f"{package.nav_source.format.value} ({package.nav_source.path})"
            if package.nav_source
            else "none"
        )
        info_lines = [
            f"[bold]{escape(metadata.title)}[/]",
            "",
            f"[dim]Author(s):[/] {escape(', '.join(metadata.authors) or 'Unknown')}",
            f"[dim]Language:[/] {metadata.language or 'Unknown'}",
            f"[dim]Publisher:[/] {escape(metadata.publisher or 'Unknown')}",
            f"[dim]Chapters:[/] {len(package.chapters)}",
            f"[dim]Navigation:[/] {nav_display}",
            f"[dim]Archive entries:[/] {len(package.archive.names())}",
            f"[dim]Identity:[/] {package.identity[:12]}",
        ]
        if loaded < len(package.chapters):
            info_lines.append("")
            info_lines.append(
                f"[yellow]{len(package.chapters) - loaded} chapter(s) unavailable[/]"
            )

        console.print()
        console.print(
            Panel(
                "\n".join(info_lines),
                title="Book Information",
                border_style="green",
            )
        )

        console.print()
        table = Table(title="Chapters", show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", width=4)
        table.add_column("Title", style="white")
        table.add_column("Path", style="dim")
        table.add_column("Words", justify="right", style="green")

        for chapter in package.chapters:
            text = package.plain_text(chapter.index)
            words = f"{len(text.split()):,}" if text is not None else "-"
            table.add_row(
                str(chapter.index + 1),
                escape(titles[chapter.index]),
                chapter.path,
                words,
            )

        console.print(table)
        console.print()


def execute_toc(book_path: Path, console: Console) -> None:
    """Display the table of contents mapped onto chapters."""
    with Package.from_path(book_path) as package:
        if not package.nav:
            console.print("[dim]No navigation document; showing chapter titles[/]")

        table = Table(
            title="Table of Contents", show_header=True, header_style="bold cyan"
        )
        table.add_column("#", style="dim", width=4)
        table.add_column("Title", style="white")
        table.add_column("Chapter", justify="right", style="green")
        table.add_column("Target", style="dim")

        for i, entry in enumerate(package.toc()):
            table.add_row(
                str(i + 1),
                escape(entry.title or "Untitled"),
                str(entry.chapter_index + 1),
                entry.target_path,
            )

        console.print(table)
