"""CLI interface for the KnowledgeHub client."""

import json

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from ....composition.container import Container, get_container
from ....config.logging import get_logger, setup_logging
from ....config.settings import settings
from ....core.domain import Document
from ....core.services.document_service import DocumentFilter
from ....core.services.qa_service import SUGGESTED_QUESTIONS
from ...common.exception_handler import (
    EXIT_GENERIC,
    EXIT_SESSION,
    describe,
    format_exception_json,
    get_exit_code,
    log_exception,
)
from .views import (
    render_document,
    render_documents,
    render_entry,
    render_search_results,
    render_transcript,
)

app = typer.Typer(
    name="knowledgehub",
    help="KnowledgeHub - manage, search and chat with your knowledge base",
    add_completion=False,
)
docs_app = typer.Typer(help="Create, browse and manage documents", add_completion=False)
app.add_typer(docs_app, name="docs")

console = Console(legacy_windows=False)


def handle_cli_error(exc: Exception) -> None:
    """Log ``exc`` and print it: one line normally, full JSON with DEBUG=true."""
    log_exception(exc, get_logger("cli"))

    if settings.debug:
        payload = json.dumps(format_exception_json(exc, include_trace=True), indent=2, default=str)
        console.print(
            Panel(escape(payload), title="[bold red]Error Details[/]", border_style="red")
        )
        return

    console.print(f"\n[red]Error[/] {escape(describe(exc))}")
    console.print("[dim]Set DEBUG=true for full details[/]")


def get_client() -> Container:
    """Build the client or exit with a readable error."""
    try:
        return get_container()
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(get_exit_code(exc))


def require_login() -> Container:
    """Return the client, exiting when there is no session."""
    client = get_client()
    if not client.session.is_authenticated:
        console.print("[red]Not logged in.[/] Run 'knowledgehub login' first.")
        raise typer.Exit(EXIT_SESSION)
    return client


def _load_document(client: Container, document_id: str) -> Document:
    if not client.documents.refresh():
        raise typer.Exit(EXIT_GENERIC)
    document = client.documents.find(document_id)
    if document is None:
        console.print(f"[red]No document with id {document_id}[/]")
        raise typer.Exit(EXIT_GENERIC)
    return document


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """KnowledgeHub command-line client."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file,
        json_format=settings.json_logs,
    )


# Session


@app.command()
def login(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Account password"),
) -> None:
    """Log in and remember the session."""
    client = get_client()
    if not client.session.login(email, password):
        raise typer.Exit(EXIT_SESSION)


@app.command()
def register(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True, help="Account password"
    ),
) -> None:
    """Create an account. Log in afterwards with 'knowledgehub login'."""
    client = get_client()
    if not client.session.register(email, password):
        raise typer.Exit(EXIT_GENERIC)


@app.command()
def logout() -> None:
    """Forget the stored session."""
    get_client().session.logout()


@app.command()
def whoami() -> None:
    """Show the logged-in user."""
    user = require_login().session.require_authenticated()
    console.print(f"[bold]{user.email}[/] [dim]({user.role.value}, id {user.id})[/]")


@app.command("config")
def show_config() -> None:
    """Show the active configuration and session state."""
    client = get_client()
    table = Table(title="KnowledgeHub configuration", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("API URL", client.settings.api_url)
    table.add_row("Request timeout", f"{client.settings.request_timeout:g}s")
    table.add_row("Local storage", str(client.settings.storage_path))
    table.add_row("Log level", client.settings.log_level)
    user = client.session.user
    table.add_row("Session", user.email if user else "[dim]not logged in[/]")
    console.print(table)


# Documents


@docs_app.command("list")
def list_documents(
    query: str = typer.Option("", "--query", "-q", help="Text to match in title, content or summary"),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Only documents with this tag (repeatable)"),
) -> None:
    """List documents, optionally filtered by text and tags."""
    client = require_login()
    if not client.documents.refresh():
        raise typer.Exit(EXIT_GENERIC)

    doc_filter = DocumentFilter(query=query)
    for t in tag:
        doc_filter.toggle_tag(t.strip().lower())
    documents = client.documents.apply(doc_filter)
    caption = None
    if doc_filter.is_active:
        caption = doc_filter.describe(len(documents), len(client.documents.documents))
    render_documents(console, documents, client.session.user, caption)


@docs_app.command("tags")
def list_tags() -> None:
    """List every tag used across documents."""
    client = require_login()
    if not client.documents.refresh():
        raise typer.Exit(EXIT_GENERIC)
    if not client.documents.tags:
        console.print("[dim]No tags yet.[/]")
        return
    for tag in client.documents.tags:
        count = len(client.documents.filter(selected_tags=[tag]))
        console.print(f"[cyan]{tag}[/] [dim]({count})[/]")


@docs_app.command("show")
def show_document(document_id: str = typer.Argument(..., help="Document id")) -> None:
    """Show one document in full."""
    client = require_login()
    render_document(console, _load_document(client, document_id))


@docs_app.command("add")
def add_document(
    title: str = typer.Option(..., "--title", prompt=True, help="Document title"),
    content: str = typer.Option(..., "--content", prompt=True, help="Document content"),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Tag to attach (repeatable)"),
) -> None:
    """Create a document."""
    client = require_login()
    editor = client.editor()
    editor.open()
    editor.title, editor.content = title, content
    for t in tag:
        editor.add_tag(t)
    if not editor.submit():
        raise typer.Exit(EXIT_GENERIC)
    if editor.saved is not None:
        console.print(f"[dim]id: {editor.saved.id}[/]")


@docs_app.command("edit")
def edit_document(
    document_id: str = typer.Argument(..., help="Document id"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    content: str | None = typer.Option(None, "--content", help="New content"),
    add_tag: list[str] = typer.Option([], "--add-tag", help="Tag to add (repeatable)"),
    remove_tag: list[str] = typer.Option([], "--remove-tag", help="Tag to remove (repeatable)"),
    generate_tags: bool = typer.Option(False, "--generate-tags", help="Merge in AI-generated tags"),
) -> None:
    """Edit a document's title, content or tags."""
    client = require_login()
    editor = client.editor(document_id)
    if not editor.open():
        raise typer.Exit(EXIT_GENERIC)

    if title is not None:
        editor.title = title
    if content is not None:
        editor.content = content
    for t in remove_tag:
        editor.remove_tag(t.strip().lower())
    for t in add_tag:
        editor.add_tag(t)
    if generate_tags:
        editor.generate_tags()

    if not editor.submit():
        raise typer.Exit(EXIT_GENERIC)


@docs_app.command("delete")
def delete_document(
    document_id: str = typer.Argument(..., help="Document id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a document."""
    client = require_login()
    document = _load_document(client, document_id)
    if not yes and not typer.confirm(f"Delete '{document.title}'?"):
        console.print("[dim]Cancelled.[/]")
        return
    if not client.documents.delete(document):
        raise typer.Exit(EXIT_GENERIC)


@docs_app.command("summarize")
def summarize_document(document_id: str = typer.Argument(..., help="Document id")) -> None:
    """Generate an AI summary for a document."""
    client = require_login()
    document = _load_document(client, document_id)
    with console.status("[bold green]Summarizing...[/]"):
        ok = client.documents.summarize(document)
    if not ok:
        raise typer.Exit(EXIT_GENERIC)
    updated = client.documents.find(document_id)
    if updated is not None and updated.summary:
        console.print(Panel(updated.summary, title="[magenta]AI Summary[/]", border_style="magenta"))


@docs_app.command("generate-tags")
def generate_document_tags(document_id: str = typer.Argument(..., help="Document id")) -> None:
    """Generate AI tags for a document."""
    client = require_login()
    document = _load_document(client, document_id)
    with console.status("[bold green]Generating tags...[/]"):
        ok = client.documents.generate_tags(document)
    if not ok:
        raise typer.Exit(EXIT_GENERIC)
    updated = client.documents.find(document_id)
    if updated is not None:
        console.print(f"[cyan]{', '.join(updated.tags) or '(no tags)'}[/]")


# Search and Q&A


@app.command()
def search(
    query: str = typer.Argument(..., help="Search text"),
    semantic: bool = typer.Option(False, "--semantic", "-s", help="Use AI semantic ranking"),
) -> None:
    """Search documents."""
    client = require_login()
    if not query.strip():
        console.print("[dim]Nothing to search for.[/]")
        return
    with console.status("[bold green]Searching...[/]"):
        results = client.search.search(query, semantic)
    if client.search.has_searched:
        render_search_results(console, results, client.search.semantic)


@app.command()
def recent(
    run: int | None = typer.Option(None, "--run", "-r", help="Re-run the Nth recent search"),
    semantic: bool = typer.Option(False, "--semantic", "-s", help="Use AI semantic ranking"),
) -> None:
    """Show recent searches, or re-run one."""
    client = require_login()
    recent_searches = client.search.recent_searches
    if run is None:
        if not recent_searches:
            console.print("[dim]No recent searches.[/]")
        for i, query in enumerate(recent_searches, start=1):
            console.print(f"[dim]{i}.[/] {query}")
        return

    if not 1 <= run <= len(recent_searches):
        console.print(f"[red]No recent search #{run}[/]")
        raise typer.Exit(EXIT_GENERIC)
    client.search.semantic = semantic
    results = client.search.rerun_recent(recent_searches[run - 1])
    render_search_results(console, results, client.search.semantic)


@app.command()
def ask(question: str = typer.Argument(..., help="Question about your documents")) -> None:
    """Ask a single question and get an answer."""
    client = require_login()
    if not question.strip():
        console.print("[dim]Nothing to ask.[/]")
        return
    with console.status("[bold green]Thinking...[/]"):
        answer = client.qa.ask(question)
    if client.qa.entries:
        render_entry(console, client.qa.entries[-1])
    if answer is None:
        raise typer.Exit(EXIT_GENERIC)


@app.command()
def chat() -> None:
    """Start an interactive Q&A session."""
    client = require_login()
    if client.qa.entries:
        render_transcript(console, client.qa.entries)
    else:
        console.print(
            Panel.fit(
                "[bold magenta]AI Q&A Assistant[/]\n"
                "[dim]Ask anything about your documents[/]\n\n"
                "Try:\n" + "\n".join(f"• {q}" for q in SUGGESTED_QUESTIONS) + "\n\n"
                "[dim]Type 'quit' or 'exit' to leave, 'clear' to reset history[/]",
                title="Welcome to KnowledgeHub",
                border_style="magenta",
            )
        )

    while True:
        try:
            question = Prompt.ask("\n[bold cyan]You[/]")
        except (KeyboardInterrupt, EOFError):
            console.print("\n[dim]Goodbye![/]")
            break

        if question.lower() in ("quit", "exit", "q"):
            console.print("[dim]Goodbye![/]")
            break
        if question.lower() == "clear":
            client.qa.clear_history()
            continue
        if not question.strip():
            continue

        with console.status("[bold green]Thinking...[/]"):
            client.qa.ask(question)
        render_entry(console, client.qa.entries[-1])


@app.command()
def history() -> None:
    """Show the Q&A conversation history."""
    render_transcript(console, require_login().qa.entries)


@app.command("clear-history")
def clear_history() -> None:
    """Erase the Q&A conversation history."""
    require_login().qa.clear_history()
