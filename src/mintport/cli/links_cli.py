"""
Command-line interface for the link checker.
"""
import logging
import typer
from typing import Optional

from rich.console import Console

from mintport.core.config import settings
from mintport.links.checker import LinkChecker
from mintport.schemas.links import LinkCheckResult

logger = logging.getLogger(__name__)
console = Console()

app = typer.Typer(help="Documentation link checks")


def _print_broken(result: LinkCheckResult):
    status = result.status if result.status is not None else "Error"
    detail = f" - {result.error}" if result.error else ""
    console.print(f"[red]BROKEN: {result.resolved if result.external else result.link.url}[/red]")
    console.print(f"   [yellow]File: {result.file}:{result.link.line}[/yellow]")
    console.print(f"   Status: {status}{detail}", style="dim")


@app.command("check")
def check(
    root: Optional[str] = typer.Option(None, "--root", help="Folder to scan; defaults to the docs root"),
    external: bool = typer.Option(False, "--external", "-e", help="Also check external links"),
    external_only: bool = typer.Option(False, "--external-only", help="Skip internal links"),
    base_url: Optional[str] = typer.Option(None, "--base-url", envvar="BASE_URL", help="Prefix for resolved site paths"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Progress bar and debug logging"),
):
    """
    Scan .md/.mdx files and report broken links. Exits 1 when any are found.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    checker = LinkChecker(
        root or settings.docs_root,
        check_external=external or external_only,
        check_internal=not external_only,
        base_url=base_url if base_url is not None else settings.base_url,
        timeout=settings.link_check_timeout,
        on_broken=_print_broken,
    )
    console.print(f"Scanning MDX/MD files for links under {checker.project_root}")
    summary = checker.run(show_progress=verbose)

    console.print("\n[bold]Summary:[/bold]")
    console.print(f"   Files scanned: {summary.files_checked}")
    console.print(f"   Links found: {summary.total_links}")
    console.print(f"   Links checked: {summary.internal_links + summary.external_links}")
    if summary.skipped_links:
        console.print(f"   [yellow]Links skipped: {summary.skipped_links}[/yellow]")
    console.print(f"   Broken links: {len(summary.broken)}")

    if not summary.ok:
        console.print("[bold red]Broken links found![/bold red]")
        raise typer.Exit(1)
    console.print("[bold green]No broken links found![/bold green]")
