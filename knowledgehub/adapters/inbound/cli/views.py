"""Rich renderers for the CLI.

Each function takes the console to print on, so commands and tests can
redirect output.
"""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from ....core.domain import Document, EntryKind, SearchResult, TranscriptEntry, User
from ....core.domain.utils import format_date, preview_tags, truncate_content


def _preview(document: Document) -> str:
    if document.summary:
        return f"[magenta]AI Summary:[/] {truncate_content(document.summary)}"
    return truncate_content(document.content)


def render_documents(
    console: Console,
    documents: list[Document],
    user: User | None = None,
    caption: str | None = None,
) -> None:
    """Print documents as a table of cards."""
    if not documents:
        console.print("[dim]No documents found.[/]")
        if caption:
            console.print(f"[dim]{caption}[/]")
        return

    table = Table(show_lines=True, caption=caption)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Tags", style="cyan")
    table.add_column("Preview")
    table.add_column("Author", style="dim")
    table.add_column("Created", style="dim", no_wrap=True)

    for doc in documents:
        title = doc.title
        if user is not None and _is_own(user, doc):
            title += " [green](yours)[/]"
        table.add_row(
            doc.id,
            title,
            ", ".join(preview_tags(doc.tags)),
            _preview(doc),
            doc.created_by.email if doc.created_by else "",
            format_date(doc.created_at),
        )
    console.print(table)


def _is_own(user: User, document: Document) -> bool:
    return document.created_by is not None and document.created_by.email == user.email


def render_document(console: Console, document: Document) -> None:
    """Print one document in full."""
    meta = [f"[dim]ID:[/] {document.id}"]
    if document.created_by:
        meta.append(f"[dim]Author:[/] {document.created_by.email}")
    if document.created_at:
        meta.append(f"[dim]Created:[/] {format_date(document.created_at)}")
    if document.updated_at:
        meta.append(f"[dim]Updated:[/] {format_date(document.updated_at)}")
    if document.tags:
        meta.append(f"[dim]Tags:[/] [cyan]{', '.join(document.tags)}[/]")

    console.print(Panel("\n".join(meta), title=f"[bold]{document.title}[/]", border_style="blue"))
    if document.summary:
        console.print(Panel(document.summary, title="[magenta]AI Summary[/]", border_style="magenta"))
    console.print(Markdown(document.content))


def render_search_results(console: Console, results: list[SearchResult], semantic: bool) -> None:
    mode = "Semantic" if semantic else "Regular"
    if not results:
        console.print(f"[dim]{mode} search: no documents matched.[/]")
        return

    table = Table(title=f"{mode} search results")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Preview")

    for i, result in enumerate(results, start=1):
        score = f"{result.relevance_score:.2f}" if result.relevance_score is not None else "-"
        table.add_row(str(i), result.id, result.title, score, _preview(result))
    console.print(table)


def render_entry(console: Console, entry: TranscriptEntry) -> None:
    time = entry.created_at.astimezone().strftime("%H:%M")
    if entry.kind is EntryKind.QUESTION:
        console.print(f"\n[bold cyan]You[/] [dim]{time}[/]")
        console.print(entry.text)
        return

    console.print(
        Panel(
            Markdown(entry.text),
            title="[bold magenta]Assistant[/]",
            subtitle=f"[dim]{time}[/]",
            border_style="magenta",
        )
    )
    if entry.sources:
        console.print("[dim]Sources:[/]")
        for source in entry.sources:
            console.print(f"  [dim]• {source}[/]")


def render_transcript(console: Console, entries: list[TranscriptEntry]) -> None:
    if not entries:
        console.print("[dim]No conversation history yet.[/]")
        return
    for entry in entries:
        render_entry(console, entry)
