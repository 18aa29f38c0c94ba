"""
Command-line interface for release notes pages.
"""
import logging
import typer
from typing import Optional

from rich.console import Console

from mintport.core.config import settings
from mintport.remote.github_client import FetchError, GitHubClient
from mintport.versioning.changelog import ChangelogService

logger = logging.getLogger(__name__)
console = Console()

app = typer.Typer(help="Release notes generated from upstream changelogs")


@app.command("generate")
def generate(
    product: str = typer.Option(..., "--product", "-p", help="Product folder, e.g. evm"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Version folder to write: next or vX.Y"),
    all_versions: bool = typer.Option(False, "--all", help="Generate for every registered version"),
    version_filter: Optional[str] = typer.Option(None, "--filter", help="Only include versions with this prefix"),
    source: str = typer.Option(
        "main", "--source", help="Branch or tag to read; 'latest' means main, 'release' the newest release tag"
    ),
    docs_root: Optional[str] = typer.Option(None, help="Repository root holding versions.json"),
):
    """
    Write <product>/<target>/changelog/release-notes.mdx.
    """
    if not target and not all_versions:
        typer.echo("Error: Must specify either --target or --all", err=True)
        raise typer.Exit(1)

    service = ChangelogService(GitHubClient.from_settings(settings), docs_root or settings.docs_root)
    config = service.product_config(product)
    console.print(f"Changelog management for [cyan]{product}[/cyan] ({config.repository})")

    try:
        if all_versions:
            results = service.generate_all(product, source)
            written = sum(1 for r in results.values() if r)
            console.print(f"[green]Generated {written} of {len(results)} release notes pages[/green]")
        else:
            result = service.generate(product, target, source, version_filter)
            if result is None:
                console.print(f"[yellow]No versions found matching filter: {version_filter or target}[/yellow]")
            else:
                path, count = result
                console.print(f"[green]Updated {path} with {count} version(s)[/green]")
    except FetchError as e:
        typer.echo(f"Failed to generate changelog: {e}", err=True)
        raise typer.Exit(1)
